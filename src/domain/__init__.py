"""Domain layer - Router contracts.

Protocols (ports) the router depends on and the value objects it hands to
controller handlers. The domain layer has NO dependencies on any framework
or infrastructure - it is pure Python.

Structure:
- protocols/: Logger and controller resolver interfaces
- value_objects/: Values attached to requests (uploaded files)
"""
