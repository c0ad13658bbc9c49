from core.compose import compose


def _tagger(tag, log):
    def wrapper(inner):
        def wrapped():
            log.append(f"enter {tag}")
            result = f"{tag}({inner()})"
            log.append(f"exit {tag}")
            return result

        return wrapped

    return wrapper


def test_compose_matches_nested_application():
    log_a, log_b = [], []
    f, g = _tagger("f", log_a), _tagger("g", log_a)
    x = lambda: "x"  # noqa: E731

    composed = compose(f, g)(x)()
    nested = _tagger("f", log_b)(_tagger("g", log_b)(x))()

    assert composed == nested == "f(g(x))"
    assert log_a == log_b == ["enter f", "enter g", "exit g", "exit f"]


def test_compose_order_matters():
    log = []
    f, g = _tagger("f", log), _tagger("g", log)

    assert compose(g, f)(lambda: "x")() == "g(f(x))"


def test_compose_without_wrappers_is_identity():
    def unit():
        return 42

    assert compose()(unit) is unit


def test_compose_is_reusable_and_fixed_at_creation():
    wrappers = [_tagger("a", []), _tagger("b", [])]
    combined = compose(*wrappers)
    wrappers.reverse()

    assert combined(lambda: "x")() == "a(b(x))"
    assert combined(lambda: "y")() == "a(b(y))"
