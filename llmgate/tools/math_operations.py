from functools import reduce
from numbers import Number
from typing import Any, Dict, List

from .registry import ToolDescriptor

OPERATIONS = {
    "add": lambda a, b: a + b,
    "subtract": lambda a, b: a - b,
    "multiply": lambda a, b: a * b,
    "divide": lambda a, b: a / b,
}


async def math_operations(args: Dict[str, Any], context: Any = None) -> float:
    """Apply ``operation`` left to right over ``numbers``."""
    operation = args.get("operation")
    numbers: List[Any] = args.get("numbers") or []

    if not isinstance(numbers, list) or len(numbers) < 2:
        raise ValueError("At least 2 numbers are required")
    if any(isinstance(n, bool) or not isinstance(n, Number) for n in numbers):
        raise ValueError("All numbers must be valid numbers")
    if operation not in OPERATIONS:
        raise ValueError(f"Unknown operation: {operation}")

    return reduce(OPERATIONS[operation], numbers)


math_operations_tool = ToolDescriptor(
    name="math_operations",
    description="Perform basic math operations",
    progress_text="Performing math calculations...",
    parameters={
        "type": "object",
        "properties": {
            "operation": {
                "type": "string",
                "enum": list(OPERATIONS),
                "description": "The math operation to perform",
            },
            "numbers": {
                "type": "array",
                "items": {"type": "number"},
                "minItems": 2,
                "description": "Numbers to perform the operation on",
            },
        },
        "required": ["operation", "numbers"],
    },
    execute=math_operations,
)
