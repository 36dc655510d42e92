"""Template lexer for Plantilla.

Architecture:
lexer/
├── __init__.py          # Re-exports Lexer
├── core.py              # Lexer class (forward scan + token creation)
└── classifiers.py       # Tag classification mixin

Usage:
    >>> from plantilla.lexer import Lexer
    >>> [t.type.name for t in Lexer("{{#if x}}y{{/if}}").tokenize()]
    ['IF_OPEN', 'TEXT', 'IF_CLOSE', 'EOF']

"""

from plantilla.lexer.core import Lexer

__all__ = ["Lexer"]
