# models_bootstrap.py
from company import models as _company_models
from role import models as _role_models
from user import models as _user_models
from auth import models as _auth_models
from department import models as _department_models
from jobrole import models as _jobrole_models
from employee import models as _employee_models
from contract import models as _contract_models
