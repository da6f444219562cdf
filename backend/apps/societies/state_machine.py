"""
State machine enforcement for Society and User status fields.

Raises InvalidStateError for disallowed transitions.
"""

from core.exceptions import InvalidStateError

# Allowed transitions for Society. A decided society may receive the same
# decision again (no state change); it may not flip to the other decision.
SOCIETY_TRANSITIONS = {
    "pending": ["approved", "rejected"],
    "approved": ["approved"],
    "rejected": ["rejected"],
}

# Allowed transitions for User account status
USER_TRANSITIONS = {
    "active": ["inactive", "suspended"],
    "inactive": ["active", "suspended"],
    "suspended": ["active"],
}


def _transitions_for(entity_type):
    if entity_type == "Society":
        return SOCIETY_TRANSITIONS
    if entity_type == "User":
        return USER_TRANSITIONS
    raise ValueError(f"Unknown entity_type: {entity_type}")


def validate_transition(entity_type, current_status, target_status):
    """
    Validate a state transition.

    Args:
        entity_type: 'Society' or 'User'
        current_status: Current state
        target_status: Target state

    Returns:
        bool: True if transition is allowed

    Raises:
        InvalidStateError: If transition is disallowed
    """
    transitions = _transitions_for(entity_type)

    if current_status not in transitions:
        raise InvalidStateError(
            f"Invalid current status: {current_status}",
            {"entity_type": entity_type, "current_status": current_status},
        )

    allowed_targets = transitions[current_status]

    if target_status not in allowed_targets:
        raise InvalidStateError(
            (
                "Invalid transition: "
                f"{entity_type} cannot transition from {current_status} to "
                f"{target_status}"
            ),
            {
                "entity_type": entity_type,
                "current_status": current_status,
                "target_status": target_status,
                "allowed_transitions": allowed_targets,
            },
        )

    return True
