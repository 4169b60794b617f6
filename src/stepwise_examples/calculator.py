from __future__ import annotations


class Calculator:
    # Minimal subject under test for the sample scenarios.
    def add(self, x: int, y: int) -> int:
        return x + y

    def subtract(self, x: int, y: int) -> int:
        return x - y

    def multiply(self, x: int, y: int) -> int:
        return x * y

    def divide(self, x: int, y: int) -> int:
        if y == 0:
            raise ValueError("Division by zero")
        return x // y
