"""Masking of credentials in log output."""

import logging
import re


MASK = '***MASKED***'
DEFAULT_SENSITIVE_FIELDS = frozenset({'password', 'token', 'api_key', 'secret'})

class SensitiveDataFilter(logging.Filter):
    """Replace the values of sensitive fields in formatted log messages.

    Handles the ``key=value`` pairs written by ``LoggerMixin`` context and the
    ``'key': 'value'`` pairs of logged dict reprs.
    """

    def __init__(self, sensitive_fields: set[str] | None = None):
        super().__init__()
        self.sensitive_fields = {f.lower() for f in (sensitive_fields or DEFAULT_SENSITIVE_FIELDS)}
        names = "|".join(re.escape(f) for f in sorted(self.sensitive_fields, key=len, reverse=True))
        self._pattern = re.compile(
            rf"(?i)(['\"]?\b(?:{names})\b['\"]?\s*[:=]\s*)(['\"]?)([^'\"\s,|}}]+)(['\"]?)"
        )

    def mask_text(self, text: str) -> str:
        return self._pattern.sub(lambda m: f"{m.group(1)}{m.group(2)}{MASK}{m.group(4)}", text)

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = self.mask_text(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True
