"""
Typed exception hierarchy for the trade documentation kernel.

Every error carries a machine-readable ``code`` class attribute and the
structured values that caused it, so callers catch by type and report by
attribute instead of parsing message strings.

Hierarchy:

    TradeDocError (base)
    |
    +-- PartyError
    |   +-- UnknownPartyTypeError
    |   +-- AmbiguousPartyError
    |
    +-- EntityNotFoundError
    |   +-- PartyNotFoundError
    |   +-- ExportDocumentNotFoundError
    |
    +-- NumberingError
    |   +-- InvalidFinancialYearError
    |
    +-- ConfigurationError

Scope:
    Calculation engines never raise for incomplete data: an unresolved
    product, size or party degrades to "contributes nothing".  These
    exceptions belong to the service and configuration boundary, where a
    caller asked for something that cannot exist (an unknown party type, a
    ledger header for a missing party, a malformed financial year).

Codes:

    Category     | Code                      | When raised
    -------------|---------------------------|-------------------------------------
    Party        | UNKNOWN_PARTY_TYPE        | party type has no ledger source
                 | AMBIGUOUS_PARTY           | party id shared by several types
    Lookup       | ENTITY_NOT_FOUND          | id missing from the store
                 | PARTY_NOT_FOUND           | party id missing for its type
                 | EXPORT_DOCUMENT_NOT_FOUND | export document id missing
    Numbering    | INVALID_FINANCIAL_YEAR    | FY label not in "YY-YY" form
    Config       | CONFIGURATION_ERROR       | invalid configuration value
"""


class TradeDocError(Exception):
    """
    Base exception for all trade documentation errors.

    All subclasses must define a ``code`` class attribute.
    """

    code: str = "TRADEDOC_ERROR"


# Party-related exceptions


class PartyError(TradeDocError):
    """Base exception for party-related errors."""

    code: str = "PARTY_ERROR"


class UnknownPartyTypeError(PartyError):
    """Party type is not one that has a ledger."""

    code: str = "UNKNOWN_PARTY_TYPE"

    def __init__(self, party_type: str, allowed: tuple[str, ...] = ()):
        self.party_type = party_type
        self.allowed = allowed
        detail = f" (expected one of: {', '.join(allowed)})" if allowed else ""
        super().__init__(f"Unknown party type: {party_type}{detail}")


class AmbiguousPartyError(PartyError):
    """Party id exists under several party types and no type was given."""

    code: str = "AMBIGUOUS_PARTY"

    def __init__(self, party_id: str, party_types: tuple[str, ...]):
        self.party_id = party_id
        self.party_types = party_types
        super().__init__(
            f"Party id {party_id} exists as {', '.join(party_types)}; pass party_type"
        )


# Lookup exceptions


class EntityNotFoundError(TradeDocError):
    """Entity with given id was not found in the store."""

    code: str = "ENTITY_NOT_FOUND"

    def __init__(self, entity_kind: str, entity_id: str):
        self.entity_kind = entity_kind
        self.entity_id = entity_id
        super().__init__(f"{entity_kind} not found: {entity_id}")


class PartyNotFoundError(EntityNotFoundError):
    """Party with given id was not found for its party type."""

    code: str = "PARTY_NOT_FOUND"

    def __init__(self, party_type: str, party_id: str):
        self.party_type = party_type
        super().__init__(party_type, party_id)


class ExportDocumentNotFoundError(EntityNotFoundError):
    """Export document with given id was not found (or is deleted)."""

    code: str = "EXPORT_DOCUMENT_NOT_FOUND"

    def __init__(self, document_id: str):
        super().__init__("export_document", document_id)


# Numbering exceptions


class NumberingError(TradeDocError):
    """Base exception for document numbering errors."""

    code: str = "NUMBERING_ERROR"


class InvalidFinancialYearError(NumberingError):
    """Financial year label is not of the form ``YY-YY``."""

    code: str = "INVALID_FINANCIAL_YEAR"

    def __init__(self, financial_year: str):
        self.financial_year = financial_year
        super().__init__(f"Invalid financial year label: {financial_year!r}")


# Configuration exceptions


class ConfigurationError(TradeDocError):
    """A configuration value is missing or out of range."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid configuration for {key}: {reason}")
