from html import escape
from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import HTMLResponse
from loguru import logger
from ...services.presentation import InvoiceSummary, build_summary
from ...services.relay_client import RelayClientError, submit_invoice

router = APIRouter(tags=["presenter"])

NO_FILE_SELECTED = "Please select a file"

PAGE_STYLE = """
    body { font-family: Arial, sans-serif; background: #fffbeb; margin: 0; }
    nav { background: #ca8a04; color: white; padding: 16px 32px; font-size: 22px; font-weight: bold; }
    main { max-width: 760px; margin: 32px auto; background: white; padding: 32px;
           border-top: 4px solid #ca8a04; border-radius: 8px; box-shadow: 0 4px 16px rgba(0,0,0,.1); }
    label { display: block; font-weight: bold; margin-bottom: 8px; }
    input[type=text] { width: 100%; padding: 10px; box-sizing: border-box; }
    .upload { background: #fffbeb; border: 2px dashed #facc15; padding: 20px; margin: 20px 0; border-radius: 8px; }
    .hint { color: #6b7280; font-size: 13px; }
    button { width: 100%; background: #ca8a04; color: white; border: 0; padding: 12px; font-size: 16px;
             border-radius: 8px; cursor: pointer; }
    button:disabled { background: #9ca3af; }
    .error { margin-top: 24px; padding: 16px; background: #fee2e2; color: #b91c1c; border-radius: 8px; }
    .error .dismiss { float: right; width: auto; background: none; color: #b91c1c; padding: 0 4px; font-size: 20px; }
    .result { margin-top: 32px; border: 1px solid #e5e7eb; border-radius: 8px; }
    .result h3 { margin: 0; background: #ca8a04; color: white; padding: 16px; border-radius: 8px 8px 0 0; }
    .section { background: #fffbeb; margin: 16px; padding: 16px; border-radius: 8px; }
    .confidence { margin: 16px; color: #6b7280; font-size: 13px; }
"""

# Disable the button and show a busy label while the relay call is in flight
SUBMIT_SCRIPT = (
    "var b=this.querySelector('button[type=submit]');"
    "b.disabled=true;b.textContent='Processing...';"
)


def _render_error(error: str) -> str:
    return f"""
        <div class="error" role="alert">
            <button type="button" class="dismiss" aria-label="Dismiss" onclick="this.parentElement.remove()">&times;</button>
            <p><strong>Error</strong></p>
            <p>{escape(error)}</p>
        </div>
    """


def _render_summary(summary: InvoiceSummary) -> str:
    sections = []
    for section in summary.sections:
        rows = "".join(
            f"<p><strong>{escape(label)}:</strong> {escape(value)}</p>"
            for label, value in section.rows
        )
        sections.append(f'<div class="section"><h4>{escape(section.title)}</h4>{rows}</div>')
    sections_html = "\n".join(sections)

    confidence = ""
    if summary.confidence:
        confidence = f'<p class="confidence">Data extraction confidence: {escape(summary.confidence)}</p>'

    return f"""
        <div class="result">
            <h3>Extracted Information</h3>
            {sections_html}
            {confidence}
        </div>
    """


def render_page(error: str | None = None, summary: InvoiceSummary | None = None, api_key: str = "") -> str:
    body = ""
    if error:
        body = _render_error(error)
    elif summary is not None:
        body = _render_summary(summary)

    return f"""<!DOCTYPE html>
<html>
    <head>
        <title>Construction Invoice Reader</title>
        <meta name="description" content="Extract information from construction invoices">
        <style>{PAGE_STYLE}</style>
    </head>
    <body>
        <nav>Invoice Reader</nav>
        <main>
            <h2>Construction Invoice Scanner</h2>
            <form method="post" action="/" enctype="multipart/form-data" onsubmit="{SUBMIT_SCRIPT}">
                <label for="api_key">API Key (optional)</label>
                <input type="text" id="api_key" name="api_key" value="{escape(api_key)}"
                       placeholder="Enter your API key or leave blank for default">
                <div class="upload">
                    <label for="file">Upload Invoice</label>
                    <input type="file" id="file" name="file" accept=".pdf,.jpg,.jpeg,.png" required>
                    <p class="hint">Supported formats: PDF, JPG, JPEG, PNG (Max size: 10MB)</p>
                </div>
                <button type="submit">Parse Invoice</button>
            </form>
            {body}
        </main>
    </body>
</html>
"""


@router.get("/", response_class=HTMLResponse)
async def home():
    """Upload form"""
    return render_page()


@router.post("/", response_class=HTMLResponse)
async def submit(file: UploadFile | None = File(None), api_key: str | None = Form(None)):
    """Send the selected invoice to the relay and render what came back"""
    api_key = (api_key or "").strip()
    if file is None or not file.filename:
        return render_page(error=NO_FILE_SELECTED, api_key=api_key)

    content = await file.read()
    try:
        invoice = await submit_invoice(
            file.filename,
            content,
            content_type=file.content_type,
            api_key=api_key or None,
        )
    except RelayClientError as e:
        logger.error("Error in submission", error=e.message, filename=file.filename)
        return render_page(error=e.message, api_key=api_key)

    return render_page(summary=build_summary(invoice), api_key=api_key)
