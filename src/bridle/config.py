"""Router configuration.

RouterConfig is a frozen dataclass: immutable after creation, no
string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Behaviour switches for ``Router``. Immutable after creation.

    Override what you need::

        config = RouterConfig(handle_method_not_allowed=False)

    ``Bridle`` always builds its router with
    ``handle_method_not_allowed=False``, so a registered path requested
    with another method answers 404 rather than 405.
    """

    # Answer 405 + Allow when the path matches but the method does not
    handle_method_not_allowed: bool = True

    # Redirect /foo/ <-> /foo when only the other form is registered
    redirect_trailing_slash: bool = True
