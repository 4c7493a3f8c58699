import unittest
from unittest.mock import MagicMock

import pytest

from microdi import Injector, Registry, UnregisteredTokenError


class TestConstructorInjection(unittest.TestCase):
    reg: Registry

    def setUp(self):
        self.reg = Registry()

    def test_construct_without_bindings_uses_zero_argument_constructor(self):
        class A:
            def __init__(self, value: int = 3):
                self.value = value

        obj = self.reg.construct(A)
        assert isinstance(obj, A)
        assert obj.value == 3

    def test_construct_resolves_bindings_in_position_order(self):
        class DB: ...

        class Cache: ...

        class Repo:
            def __init__(self, db, cache):
                self.db = db
                self.cache = cache

        self.reg.register_resolver("db", DB)
        self.reg.register_resolver("cache", Cache)
        # bound out of order on purpose
        self.reg.bind_argument(Repo, 1, "cache")
        self.reg.bind_argument(Repo, 0, "db")

        obj = self.reg.construct(Repo)
        assert isinstance(obj.db, DB)
        assert isinstance(obj.cache, Cache)

    def test_construct_with_explicit_arguments_bypasses_bindings(self):
        class Repo:
            def __init__(self, db, cache):
                self.db = db
                self.cache = cache

        resolver = MagicMock()
        self.reg.register_resolver("db", resolver)
        self.reg.bind_argument(Repo, 0, "db")
        self.reg.bind_argument(Repo, 1, "db")

        obj = self.reg.construct(Repo, "v1", "v2")
        assert (obj.db, obj.cache) == ("v1", "v2")
        assert resolver.call_count == 0

    def test_construct_with_explicit_keyword_arguments_bypasses_bindings(self):
        class Repo:
            def __init__(self, db=None):
                self.db = db

        self.reg.bind_argument(Repo, 0, "missing")
        obj = self.reg.construct(Repo, db="explicit")
        assert obj.db == "explicit"

    def test_construct_applies_transform(self):
        class Settings:
            dsn = "sqlite://"

        class Repo:
            def __init__(self, dsn):
                self.dsn = dsn

        self.reg.register_singleton(Settings, Settings)
        self.reg.bind_argument(Repo, 0, Settings, transform=lambda s: s.dsn)

        assert self.reg.construct(Repo).dsn == "sqlite://"

    def test_construct_passes_bound_arguments_to_resolver(self):
        class Repo:
            def __init__(self, conn):
                self.conn = conn

        self.reg.register_resolver("conn", lambda host, port: f"{host}:{port}")
        self.reg.bind_argument(Repo, 0, "conn", "localhost", 5432)

        assert self.reg.construct(Repo).conn == "localhost:5432"

    def test_lazy_bound_argument_is_evaluated_at_construction_time(self):
        class Repo:
            def __init__(self, conn):
                self.conn = conn

        config = {"host": "unset"}
        self.reg.register_resolver("conn", lambda host: f"conn to {host}")
        self.reg.bind_argument(Repo, 0, "conn", lambda: config["host"])

        config["host"] = "db.internal"
        assert self.reg.construct(Repo).conn == "conn to db.internal"

        config["host"] = "replica.internal"
        assert self.reg.construct(Repo).conn == "conn to replica.internal"

    def test_trailing_unbound_parameters_use_constructor_defaults(self):
        class Repo:
            def __init__(self, db, timeout=30):
                self.db = db
                self.timeout = timeout

        self.reg.register_resolver("db", lambda: "db")
        self.reg.bind_argument(Repo, 0, "db")

        obj = self.reg.construct(Repo)
        assert obj.db == "db"
        assert obj.timeout == 30

    def test_interior_unbound_parameters_use_default_or_none(self):
        class Repo:
            def __init__(self, first, second, third=7, fourth=None):
                self.args = (first, second, third, fourth)

        self.reg.register_resolver("value", lambda: "v")
        self.reg.bind_argument(Repo, 0, "value")
        self.reg.bind_argument(Repo, 3, "value")

        assert self.reg.construct(Repo).args == ("v", None, 7, "v")

    def test_rebinding_a_position_replaces_previous_binding(self):
        class Repo:
            def __init__(self, db):
                self.db = db

        self.reg.register_resolver("primary", lambda: "primary")
        self.reg.register_resolver("replica", lambda: "replica")
        self.reg.bind_argument(Repo, 0, "primary")
        self.reg.bind_argument(Repo, 0, "replica")

        assert self.reg.construct(Repo).db == "replica"

    def test_binding_past_declared_parameters_extends_slots(self):
        class Variadic:
            def __init__(self, *values):
                self.values = values

        self.reg.register_resolver("value", lambda n: n)
        self.reg.bind_argument(Variadic, 2, "value", 3)
        self.reg.bind_argument(Variadic, 0, "value", 1)

        assert self.reg.construct(Variadic).values == (1, None, 3)

    def test_injectors_exposes_slots(self):
        class Repo:
            def __init__(self, db, cache):
                pass

        transform = str
        assert self.reg.injectors(Repo) == ()

        self.reg.bind_argument(Repo, 1, "cache", "arg", transform=transform)
        assert self.reg.injectors(Repo) == (None, Injector(token="cache", transform=transform, args=("arg",)))

    def test_bind_argument_returns_class(self):
        class Repo:
            def __init__(self, db):
                pass

        assert self.reg.bind_argument(Repo, 0, "db") is Repo

    def test_bind_argument_rejects_negative_position(self):
        class Repo:
            def __init__(self, db):
                pass

        with pytest.raises(ValueError):
            self.reg.bind_argument(Repo, -1, "db")

    def test_bind_argument_rejects_non_class_target(self):
        with pytest.raises(TypeError):
            self.reg.bind_argument(lambda db: db, 0, "db")

    def test_construct_unregistered_binding_raises(self):
        class Repo:
            def __init__(self, db):
                pass

        self.reg.bind_argument(Repo, 0, "db")
        with pytest.raises(UnregisteredTokenError):
            self.reg.construct(Repo)

    def test_bindings_are_per_registry(self):
        class Repo:
            def __init__(self, db=None):
                self.db = db

        other = Registry()
        self.reg.register_resolver("db", lambda: "db")
        self.reg.bind_argument(Repo, 0, "db")

        assert self.reg.construct(Repo).db == "db"
        assert other.construct(Repo).db is None
