"""
Sanitization for column names and free text that reach logs or LLM prompts.
"""
import re


def sanitize_for_logging(value: str, max_length: int = 200) -> str:
    """
    Sanitize value for safe logging (prevents log injection).

    Args:
        value: Value to sanitize, usually a column name from user data
        max_length: Maximum length

    Returns:
        Sanitized value safe for logging
    """
    if not value:
        return ""

    value = re.sub(r'[\r\n]', ' ', str(value))
    value = re.sub(r'[\x00-\x1f\x7f-\x9f]', '', value)

    if len(value) > max_length:
        value = value[:max_length] + "..."

    return value


def sanitize_for_prompt(text: str, max_length: int = 500) -> str:
    """
    Sanitize user-provided text before including it in an LLM prompt.

    Removes control characters and newlines, limits length and brackets
    patterns that read like role or instruction markers.
    """
    if not text:
        return ""

    sanitized = ''.join(char for char in str(text) if char.isprintable() and char not in '\n\r\t')

    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "..."

    dangerous_patterns = ['SYSTEM:', 'USER:', 'ASSISTANT:', 'IGNORE', 'FORGET', 'NEW INSTRUCTION']
    for pattern in dangerous_patterns:
        sanitized = sanitized.replace(pattern, f'[{pattern}]')

    return sanitized
