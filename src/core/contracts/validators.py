"""
JSON Schema контракты read-моделей.

offering.json           — Offering.to_view()
application_record.json — ApplicationRecord.model_dump(mode="json")
investor.json           — Investor.to_view()
draw_result.json        — DrawResult.model_dump(mode="json")
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator

import jsonschema
from jsonschema import Draft202012Validator


class SchemaLoader:
    """Загрузка и кэш схем из <project>/contracts/schema/."""

    def __init__(self):
        self._schema_dir = Path(__file__).parent.parent.parent.parent / "contracts" / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")
        self._schemas: Dict[str, Dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Raises:
            FileNotFoundError: нет файла <schema_name>.json
            ValueError: схема не проходит meta-validation Draft 2020-12
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


class ContractValidator:
    """Валидатор одной read-модели; ошибки — jsonschema.ValidationError."""

    schema_name: str = ""

    def __init__(self):
        self.schema = _SCHEMA_LOADER.load_schema(self.schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[jsonschema.ValidationError]:
        return self.validator.iter_errors(data)


class OfferingValidator(ContractValidator):
    schema_name = "offering"


class ApplicationRecordValidator(ContractValidator):
    schema_name = "application_record"


class InvestorValidator(ContractValidator):
    schema_name = "investor"


class DrawResultValidator(ContractValidator):
    schema_name = "draw_result"


def validate_offering(data: Dict[str, Any]) -> None:
    OfferingValidator().validate(data)


def validate_application_record(data: Dict[str, Any]) -> None:
    ApplicationRecordValidator().validate(data)


def validate_investor(data: Dict[str, Any]) -> None:
    InvestorValidator().validate(data)


def validate_draw_result(data: Dict[str, Any]) -> None:
    DrawResultValidator().validate(data)
