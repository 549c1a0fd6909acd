from __future__ import annotations
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TOOL_NAME = "search_bapi_file"
DISTINCT_VALUES_HEADER = "\n\n--- Distinct Values Report ---\n"

class SearchFileRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Either a local path OR an S3 object key
    file_path: Optional[str] = Field(None, alias="filePath")
    s3_key: Optional[str] = Field(None, alias="s3Key")
    search_property: str = Field(..., alias="searchProperty", min_length=1)
    search_value: Optional[str] = Field(None, alias="searchValue")

    @field_validator("search_property")
    @classmethod
    def property_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("searchProperty must not be blank")
        return v

    @field_validator("search_value")
    @classmethod
    def blank_value_means_any(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @model_validator(mode="after")
    def one_source(self) -> "SearchFileRequest":
        if bool(self.file_path) == bool(self.s3_key):
            raise ValueError("Provide exactly one of filePath or s3Key")
        return self

class ContentItem(BaseModel):
    type: Literal["text"] = "text"
    text: str

class SearchFileResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    report: str
    distinct_values: Optional[str] = Field(None, alias="distinctValues")
    content: List[ContentItem] = Field(default_factory=list)
    meta: Dict[str, Any] = Field(default_factory=dict)

def tool_definition() -> Dict[str, Any]:
    return {
        "name": TOOL_NAME,
        "description": "Searches a BAPI JSON file for a specific property and optional value, and returns an analysis report.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "filePath": {"type": "string", "description": "Path of the BAPI JSON file to search, inside the BAPI_DATA_DIR directory."},
                "s3Key": {"type": "string", "description": "Alternative to filePath: key of the JSON file in the configured S3 bucket."},
                "searchProperty": {"type": "string", "description": "Property name to search for."},
                "searchValue": {"type": "string", "description": "Optional. Property value to filter by."},
            },
            "required": ["searchProperty"],
        },
        "outputSchema": {
            "type": "object",
            "properties": {
                "report": {"type": "string", "description": "The analysis report content."},
                "distinctValues": {
                    "type": "string",
                    "description": "Distinct values found for the searchProperty (if no searchValue was provided).",
                },
            },
            "required": ["report"],
        },
    }
