from typing import Any, Optional


class VendorError(Exception):
    """A hosted vendor API answered with a non-success status."""

    def __init__(self, vendor: str, status_code: int, detail: Optional[Any] = None) -> None:
        super().__init__(f"{vendor} API error: {status_code} {detail or ''}".strip())
        self.vendor = vendor
        self.status_code = status_code
        self.detail = detail
