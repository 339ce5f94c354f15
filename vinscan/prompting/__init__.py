"""Prompting package.

Deterministic instruction builders (`prompt_builder`) and structured-output
schemas (`schemas`) for the adapter operations. No model invocation happens here.
"""
