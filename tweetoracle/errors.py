from __future__ import annotations


class OracleError(RuntimeError):
    """Base for every failure that aborts an invocation."""

    code = "ORACLE_ERROR"


# decode stage

class MalformedInput(OracleError):
    code = "MALFORMED_INPUT"


class MissingField(OracleError):
    code = "MISSING_FIELD"

    def __init__(self, name: str) -> None:
        super().__init__(f"{name} cannot be undefined")
        self.name = name


# fetch stage

class AttestationUnavailable(OracleError):
    code = "ATTESTATION_UNAVAILABLE"


# eligibility stage

class IneligibleTweet(OracleError):
    code = "INELIGIBLE"


class TooRecent(IneligibleTweet):
    code = "TOO_RECENT"


class MissingRequiredTag(IneligibleTweet):
    code = "MISSING_REQUIRED_TAG"


class MissingRequiredMention(IneligibleTweet):
    code = "MISSING_REQUIRED_MENTION"


class Withheld(IneligibleTweet):
    code = "WITHHELD"


# scoring stage

class MissingMetric(OracleError):
    code = "MISSING_METRIC"


class ArithmeticOverflow(OracleError):
    code = "ARITHMETIC_OVERFLOW"


# encode stage

class InvalidPayload(OracleError):
    code = "INVALID_PAYLOAD"


class InstructionTooLarge(OracleError):
    code = "INSTRUCTION_TOO_LARGE"


class ConfigError(ValueError):
    """Bad or missing settings, host accounts or container params source."""
