def first(iterable, default=None):
    for item in iterable:
        return item
    return default


def first_where(iterable, pred, default=None):
    return first((x for x in iterable if pred(x)), default=default)
