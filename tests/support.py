from quizbuilder.database import SQLDatabase

COMPANY_ID = "company-1"


class RacingDatabase(SQLDatabase):
    """SQLite store that can run a competing write just before one of ours.

    ``before("update", predicate, action)`` fires ``action`` right before the
    next update whose (table, data, filters) satisfies ``predicate``, up to
    ``times`` times. If ``action`` raises, our write never reaches the store,
    which is how tests inject failures.
    """

    def __init__(self, engine):
        super().__init__(engine)
        self.hooks = []

    def before(self, method, predicate, action, times=1):
        self.hooks.append({"method": method, "predicate": predicate, "action": action, "times": times})

    def _fire(self, method, table, data, filters):
        for hook in list(self.hooks):
            if hook["method"] == method and hook["predicate"](table, data, filters):
                hook["times"] -= 1
                if hook["times"] <= 0:
                    self.hooks.remove(hook)
                hook["action"]()
                return

    def insert(self, table, data):
        self._fire("insert", table, data, None)
        return super().insert(table, data)

    def update(self, table, data, filters):
        self._fire("update", table, data, filters)
        return super().update(table, data, filters)

    def delete(self, table, filters):
        self._fire("delete", table, None, filters)
        return super().delete(table, filters)


def raiser(exc):
    def action():
        raise exc
    return action


def promotes(table, data, filters):
    """Predicate: an update that marks an alternative correct"""
    return table == "alternatives" and data == {"is_correct": True}


def alternatives_state(builder, exercise_id):
    """(content, is_correct, order) triples in display order"""
    return [(a.content, a.is_correct, a.order) for a in builder.alternatives.list(exercise_id)]


def assert_invariants(builder, exercise_id):
    alternatives = builder.alternatives.list(exercise_id)
    assert [a.order for a in alternatives] == list(range(len(alternatives)))
    if alternatives:
        assert sum(a.is_correct for a in alternatives) == 1


def renumbers(table):
    """Predicate: an update that writes a row's position in ``table``"""
    def predicate(name, data, filters):
        return name == table and "order" in data
    return predicate
