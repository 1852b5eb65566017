"""
Contract Validation Module

Модуль для валидации JSON read-моделей, отдаваемых коллабораторам
отображения (offering, application_record, investor, draw_result).
"""

from .validators import (
    ApplicationRecordValidator,
    ContractValidator,
    DrawResultValidator,
    InvestorValidator,
    OfferingValidator,
    SchemaLoader,
    validate_application_record,
    validate_draw_result,
    validate_investor,
    validate_offering,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "OfferingValidator",
    "ApplicationRecordValidator",
    "InvestorValidator",
    "DrawResultValidator",
    # Functions
    "validate_offering",
    "validate_application_record",
    "validate_investor",
    "validate_draw_result",
]
