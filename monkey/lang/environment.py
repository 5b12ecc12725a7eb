"""Lexically scoped symbol tables.

An Environment maps names to runtime values and may have an outer Environment. Lookups walk outward; writes never do.
Function values hold on to the Environment they were defined in, so several closures (and the call frame that made
them) can share one scope: parent links only point outward, so the chain never forms a cycle.
"""


class Environment:
    """One scope. The outermost Environment (no outer) is the one a Session keeps for the whole run."""

    def __init__(self, outer=None):
        self.store = {}
        self.outer = outer

    @classmethod
    def new_enclosed(cls, outer):
        """Returns a fresh, empty scope whose lookups fall back to outer (used for call frames)."""
        return cls(outer)

    def get(self, name):
        """Returns the value bound to name in the nearest scope that binds it, or None if no scope does."""
        env = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name, value):
        """Binds name to value in this scope only: an outer binding of the same name is shadowed, not overwritten."""
        self.store[name] = value
        return value

    def __contains__(self, name):
        return self.get(name) is not None

    def __len__(self):
        return len(self.store)

    def __iter__(self):
        return iter(self.store.items())

    def __repr__(self):
        return f"Environment({list(self.store)}, outer={self.outer is not None})"
