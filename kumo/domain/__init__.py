"""
Kumo – Domain Layer
===================
Entities, value objects, the Ichimoku calculator and domain exceptions.

DEPENDENCY RULE:
Nothing in here imports from application/, infrastructure/ or presentation/.
"""
