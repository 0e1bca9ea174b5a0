"""
Infrastructure Layer

This layer contains concrete implementations of interfaces defined
in the application layer. It handles external concerns like HTTP,
colour math and dependency wiring.
"""
