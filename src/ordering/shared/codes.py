"""Random human-friendly codes (order lookup codes, generated promo codes)."""

import secrets

# No "I" to avoid confusion with "1".
CODE_ALPHABET = "ABCDEFGHJKLMNOPQRSTUVWXYZ0123456789"
CODE_LENGTH = 8


def generate_code(length: int = CODE_LENGTH, alphabet: str = CODE_ALPHABET) -> str:
    return "".join(secrets.choice(alphabet) for _ in range(length))


def generate_unique_code(is_taken, attempts: int = 20, length: int = CODE_LENGTH) -> str:
    """Draw codes until ``is_taken(code)`` is False.

    Raises RuntimeError when every attempt collides, which only happens when
    the code space is nearly exhausted.
    """
    for _ in range(attempts):
        code = generate_code(length)
        if not is_taken(code):
            return code
    raise RuntimeError(f"Could not generate a unique code after {attempts} attempts")
