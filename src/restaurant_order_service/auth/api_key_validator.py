"""Staff API key checks for the front-of-house endpoints."""

import hmac


class APIKeyValidator:
    """Checks the key a front-of-house terminal presents against the staff keys.

    Comparison is constant-time per configured key, so response timing does
    not reveal how much of a key matched.
    """

    def __init__(self, api_keys: list[str]) -> None:
        """Initialize validator with the staff keys.

        Args:
            api_keys: Staff API key strings; blank entries are ignored

        Raises:
            ValueError: If no non-blank key is provided
        """
        keys = frozenset(key for key in api_keys if key.strip())
        if not keys:
            raise ValueError("At least one API key must be provided")

        self.api_keys = keys

    def validate(self, api_key: str) -> bool:
        """Return True if api_key exactly matches one of the staff keys."""
        presented = api_key.encode()
        return any(hmac.compare_digest(presented, key.encode()) for key in self.api_keys)
