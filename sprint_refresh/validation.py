"""
Input validation and WIQL query sanitization.
"""

from .errors import ValidationError


MAX_QUERY_LENGTH = 32000  # 32KB limit per Azure DevOps documentation


def sanitize_wiql_string(value: str) -> str:
    """Escape single quotes so the value is safe inside a WIQL string literal."""
    return value.replace("'", "''")


def validate_iteration_path(iteration_path: str) -> str:
    """
    Validate an iteration path before it is embedded in a query.

    Args:
        iteration_path: Full iteration path (e.g. "Project\\Sprint 5")

    Returns:
        The iteration path, unchanged

    Raises:
        ValidationError: If the path is empty or contains traversal characters
    """
    if not iteration_path or not iteration_path.strip():
        raise ValidationError("Iteration path cannot be empty")

    if '..' in iteration_path or '//' in iteration_path:
        raise ValidationError(
            f"Invalid iteration path: '{iteration_path}'. "
            "Path traversal characters not allowed."
        )

    return iteration_path


def validate_wiql(query: str) -> str:
    """
    Check the basic structure of a WIQL query.

    Args:
        query: The WIQL query to validate

    Returns:
        The validated query (unchanged)

    Raises:
        ValidationError: If query is invalid
    """
    if not query:
        raise ValidationError("WIQL query cannot be empty")

    if len(query) > MAX_QUERY_LENGTH:
        raise ValidationError(
            f"WIQL query exceeds maximum length of {MAX_QUERY_LENGTH} characters "
            f"(current length: {len(query)})"
        )

    query_upper = query.upper()
    for clause in ('SELECT', 'FROM', 'WHERE'):
        if clause not in query_upper:
            raise ValidationError(f"WIQL query must contain {clause} clause")

    # Note: FROM WorkItems is case-sensitive in Azure DevOps WIQL
    if 'FROM WorkItems' not in query:
        raise ValidationError("WIQL query FROM clause must be 'WorkItems'")

    depth = 0
    for char in query:
        if char == '[':
            depth += 1
        elif char == ']':
            depth -= 1
        if depth < 0:
            break
    if depth != 0:
        raise ValidationError("WIQL query has unbalanced square brackets")

    return query
