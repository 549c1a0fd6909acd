import os
import logging
from typing import Optional, Dict, Any

from fastapi import FastAPI, UploadFile, File, Form, HTTPException

from bapi_analyzer.analyzer import analyze_document, parse_document, utc_iso
from bapi_analyzer.document_source import (
    file_label,
    get_bucket,
    get_data_dir,
    get_s3,
    read_local_text,
    resolve_data_path,
    s3_get_text,
)
from bapi_analyzer.errors import (
    AnalysisError,
    ParseError,
    SourceIsDirectoryError,
    SourceNotFoundError,
    SourceOutsideRootError,
)
from bapi_analyzer.search_contracts import (
    DISTINCT_VALUES_HEADER,
    TOOL_NAME,
    ContentItem,
    SearchFileRequest,
    SearchFileResponse,
    tool_definition,
)

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

app = FastAPI()

@app.get("/")
def root():
    return {"message": "BAPI analyzer running", "docs": "/docs", "health": "/health", "tools": "/tools"}

@app.get("/health")
def health():
    return {"status": "ok"}

@app.get("/tools")
def list_tools() -> Dict[str, Any]:
    return {"tools": [tool_definition()]}

def _run_search(text: str, label: str, search_property: str, search_value: Optional[str]) -> SearchFileResponse:
    timestamp = utc_iso()
    try:
        document = parse_document(text)
        result = analyze_document(
            document,
            search_property,
            search_value,
            file_label=label,
            timestamp=timestamp,
        )
    except ParseError as e:
        logger.warning("Rejected %s: %s", label, e)
        raise HTTPException(status_code=400, detail=f"Invalid JSON in {label}: {e}")
    except AnalysisError as e:
        logger.exception("Error in BAPI search/report generation for %s", label)
        raise HTTPException(status_code=500, detail=f"BAPI tool failed during search/report generation: {e}")

    report = result.report
    content = [ContentItem(text=report.main_report)]
    if report.distinct_values_report:
        content.append(ContentItem(text=DISTINCT_VALUES_HEADER + report.distinct_values_report))

    logger.info("%s %r on %s: %s matches", TOOL_NAME, search_property, label, len(result.matches))
    return SearchFileResponse(
        report=report.main_report,
        distinct_values=report.distinct_values_report,
        content=content,
        meta={
            "file": label,
            "matches": len(result.matches),
            "patterns": len(result.aggregation.pattern_groups),
            "timestamp": timestamp,
        },
    )

@app.post(f"/tools/{TOOL_NAME}", response_model=SearchFileResponse)
def search_bapi_file(req: SearchFileRequest) -> SearchFileResponse:
    """
    Reads the JSON file (local path or S3 key), searches it for
    search_property and returns the main report plus distinct values.
    """
    if req.file_path:
        try:
            data_dir = get_data_dir()
        except RuntimeError as e:
            raise HTTPException(status_code=500, detail=str(e))

        try:
            text = read_local_text(resolve_data_path(req.file_path, data_dir))
        except SourceOutsideRootError as e:
            raise HTTPException(status_code=403, detail=str(e))
        except SourceNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except SourceIsDirectoryError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except ParseError as e:
            raise HTTPException(status_code=400, detail=str(e))
        label = file_label(req.file_path)
    else:
        try:
            bucket = get_bucket()
            s3 = get_s3()
        except RuntimeError as e:
            raise HTTPException(status_code=500, detail=str(e))

        key = req.s3_key.strip()
        try:
            text = s3_get_text(s3, bucket, key)
        except SourceNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except ParseError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to download from S3: {e}")
        label = file_label(key)

    return _run_search(text, label, req.search_property, req.search_value)

@app.post("/search-upload", response_model=SearchFileResponse)
async def search_upload(
    file: UploadFile = File(...),
    search_property: str = Form(...),
    search_value: Optional[str] = Form(None),
) -> SearchFileResponse:
    if not search_property.strip():
        raise HTTPException(status_code=400, detail="search_property is required")

    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Empty file")

    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise HTTPException(status_code=400, detail=f"File is not UTF-8 text: {e}")

    return _run_search(text, file_label(file.filename or "upload.json"), search_property.strip(), search_value or None)
