import io
import unittest
import zipfile

from docx import Document

from contract.renderer import (
    STRATEGY_DOCX,
    STRATEGY_RAW,
    STRATEGY_ZIP_XML,
    TemplateRenderError,
    find_placeholders,
    render_template,
)

VALUES = {
    "firstName": "Jane",
    "lastName": "Doe",
    "fullName": "Jane Doe",
    "jobTitle": "Engineer",
    "companyName": "Smith & Co",
    "address": "1 High Street",
    "baseSalary": "£35,000.00",
}


def docx_bytes(doc) -> bytes:
    out = io.BytesIO()
    doc.save(out)
    return out.getvalue()


def build_template() -> bytes:
    doc = Document()
    p = doc.add_paragraph()
    p.add_run("Dear {{first")
    tail = p.add_run("_name}}, welcome")
    tail.bold = True
    doc.add_paragraph("Your salary is {{ salery }} as {{JOB_TITLE}}.")
    doc.add_paragraph("Favourite colour: {{favouriteColour}}")

    table = doc.add_table(rows=1, cols=2)
    table.cell(0, 0).text = "Employer"
    inner = table.cell(0, 1).add_table(rows=1, cols=1)
    inner.cell(0, 0).text = "{{company_name}}"

    doc.sections[0].header.paragraphs[0].text = "{{companyName}} confidential"
    doc.sections[0].footer.paragraphs[0].text = "Prepared for {{fullName}}"
    return docx_bytes(doc)


def all_text(content: bytes) -> list[str]:
    doc = Document(io.BytesIO(content))
    texts = [p.text for p in doc.paragraphs]
    for table in doc.tables:
        for row in table.rows:
            for cell in row.cells:
                texts.extend(p.text for p in cell.paragraphs)
                for t in cell.tables:
                    texts.extend(c.text for r in t.rows for c in r.cells)
    section = doc.sections[0]
    texts.extend(p.text for p in section.header.paragraphs)
    texts.extend(p.text for p in section.footer.paragraphs)
    return texts


class DocxRenderTests(unittest.TestCase):
    def setUp(self):
        self.result = render_template(build_template(), VALUES)

    def test_uses_structured_strategy(self):
        self.assertEqual(self.result.strategy, STRATEGY_DOCX)

    def test_placeholder_split_across_runs(self):
        doc = Document(io.BytesIO(self.result.content))
        p = doc.paragraphs[0]
        self.assertEqual(p.text, "Dear Jane, welcome")
        # replacement lives in the first run; the bold run keeps only its own text
        self.assertEqual(p.runs[0].text, "Dear Jane")
        self.assertEqual(p.runs[1].text, ", welcome")
        self.assertTrue(p.runs[1].bold)

    def test_conventions_and_typos_in_body(self):
        doc = Document(io.BytesIO(self.result.content))
        self.assertEqual(doc.paragraphs[1].text, "Your salary is £35,000.00 as Engineer.")

    def test_tables_headers_and_footers(self):
        texts = all_text(self.result.content)
        self.assertIn("Smith & Co", texts)
        self.assertIn("Smith & Co confidential", texts)
        self.assertIn("Prepared for Jane Doe", texts)

    def test_unresolved_left_in_place_and_reported(self):
        doc = Document(io.BytesIO(self.result.content))
        self.assertEqual(doc.paragraphs[2].text, "Favourite colour: {{favouriteColour}}")
        self.assertEqual(self.result.unresolved, ["favouriteColour"])
        self.assertEqual(self.result.replaced["salery"], "baseSalary")


class FallbackRenderTests(unittest.TestCase):
    def test_plain_bytes_are_rewritten(self):
        result = render_template(b"Hello {{first_name}} at {{unknown}}", VALUES)
        self.assertEqual(result.strategy, STRATEGY_RAW)
        self.assertEqual(result.content, b"Hello Jane at {{unknown}}")
        self.assertEqual(result.unresolved, ["unknown"])

    def test_non_utf8_bytes_survive(self):
        result = render_template(b"\xff\xfe {{lastName}}", VALUES)
        self.assertEqual(result.content, b"\xff\xfe Doe")

    def test_zip_package_xml_members_escaped(self):
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as z:
            z.writestr("word/document.xml", "<w:t>{{companyName}}</w:t>")
            z.writestr("media/logo.bin", b"{{companyName}}")
        result = render_template(buf.getvalue(), VALUES)
        self.assertEqual(result.strategy, STRATEGY_ZIP_XML)
        with zipfile.ZipFile(io.BytesIO(result.content)) as z:
            self.assertEqual(z.read("word/document.xml").decode(), "<w:t>Smith &amp; Co</w:t>")
            self.assertEqual(z.read("media/logo.bin"), b"{{companyName}}")

    def test_docx_with_broken_document_xml_uses_zip_members(self):
        doc = Document()
        doc.add_paragraph("Employer: {{companyName}}")
        src = io.BytesIO(docx_bytes(doc))
        buf = io.BytesIO()
        with zipfile.ZipFile(src) as original, zipfile.ZipFile(buf, "w") as broken:
            for item in original.infolist():
                data = original.read(item.filename)
                if item.filename == "word/document.xml":
                    # cut off the closing tags
                    data = data[: data.rindex(b"<w:sectPr")]
                broken.writestr(item, data)

        result = render_template(buf.getvalue(), VALUES)
        self.assertEqual(result.strategy, STRATEGY_ZIP_XML)
        with zipfile.ZipFile(io.BytesIO(result.content)) as z:
            body = z.read("word/document.xml").decode()
        self.assertIn("Employer: Smith &amp; Co", body)
        self.assertNotIn("{{companyName}}", body)

    def test_empty_template_rejected(self):
        with self.assertRaises(TemplateRenderError):
            render_template(b"", VALUES)


class FindPlaceholdersTests(unittest.TestCase):
    def test_docx_placeholders_in_order(self):
        names = find_placeholders(build_template())
        self.assertEqual(names[:4], ["first_name", "salery", "JOB_TITLE", "favouriteColour"])
        self.assertIn("company_name", names)
        self.assertIn("fullName", names)

    def test_plain_text(self):
        self.assertEqual(find_placeholders(b"{{a}} {{ b }} {{a}}"), ["a", "b"])


if __name__ == "__main__":
    unittest.main()
