"""
actionguard test suite.

- Action registry and policy definition tests
- Policy check, override and caching tests
- Grant store, registry and facade tests
"""
