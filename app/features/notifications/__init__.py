"""
Deadline notification feature module.

Decides when a tracked project or task has reached a deadline alert threshold,
emits each (entity, threshold) alert exactly once and routes it to the in-app
notification feed and, for offline users, to email.
"""
