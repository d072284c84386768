"""Test case file schema definitions and loading."""
import json
import fastjsonschema
from pathlib import Path
from typing import Any, Dict, List, Union

from ..errors import CaseFileError
from ..utils.logger import get_logger

logger = get_logger(__name__)


# JSON Schema for a single alert test case
TEST_CASE_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["name", "task_name", "type", "script", "db", "expects"],
    "properties": {
        "name": {
            "type": "string",
            "minLength": 1
        },
        "task_name": {
            "type": "string",
            "pattern": "^[A-Za-z0-9_.-]+$",
            "minLength": 1
        },
        "type": {
            "type": "string",
            "enum": ["stream", "batch"]
        },
        "script": {
            "type": "string",
            "minLength": 1
        },
        "db": {
            "type": "string",
            "minLength": 1
        },
        "rp": {
            "type": "string"
        },
        "duration": {
            "type": "string",
            "pattern": "^([0-9]+[smhdw])+$|^INF$"
        },
        "data": {
            "type": "array",
            "items": {"type": "string"}
        },
        "wait_seconds": {
            "type": "number",
            "minimum": 0
        },
        "expects": {
            "type": "object",
            "minProperties": 1,
            "additionalProperties": {
                "type": "integer",
                "minimum": 0
            }
        }
    },
    "additionalProperties": False
}

# Compile schema for fast validation
validate_test_case = fastjsonschema.compile(TEST_CASE_SCHEMA)


def load_test_cases(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Load and validate the test cases in a JSON file.
    
    The file holds either one test case object or ``{"tests": [...]}``.
    
    Args:
        path: Path to the test case file
        
    Returns:
        Validated test cases
        
    Raises:
        CaseFileError: If the file cannot be read or a case fails validation
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            document = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CaseFileError(f"Cannot read test case file {path}: {e}") from e
    
    if isinstance(document, dict) and "tests" in document:
        cases = document["tests"]
        if not isinstance(cases, list):
            raise CaseFileError(f"{path}: 'tests' must be a list")
    else:
        cases = [document]
    
    for index, case in enumerate(cases):
        try:
            validate_test_case(case)
        except fastjsonschema.JsonSchemaException as e:
            logger.error(
                "test_case_validation_failed",
                path=str(path),
                index=index,
                error=str(e)
            )
            raise CaseFileError(f"{path}: test case #{index} is invalid: {e}") from e
    
    logger.info("test_cases_loaded", path=str(path), count=len(cases))
    return cases
