# teamctl/core/utils.py


def url_join(*paths: str) -> str:
    """Joins URL fragments so exactly one slash separates each pair."""
    last = len(paths) - 1
    pieces = []
    for i, path in enumerate(paths):
        if i > 0:
            path = path.lstrip('/')
        if i < last:
            path = path.rstrip('/')
        pieces.append(path)
    return '/'.join(pieces)
