from types import SimpleNamespace

import pytest
from hypothesis import given
from hypothesis import strategies as st

from kv_collection import Collection, UnsupportedOperation


class Greeter:
    def __init__(self) -> None:
        self.calls = 0

    def hello(self, name: str = "world") -> str:
        self.calls += 1
        return f"hello {name}"


def test_each_mutates_in_place_and_returns_self() -> None:
    collection = Collection([1, 2, 3, 4, 5])
    result = collection.each(lambda item, _key, _coll: item + 1)

    assert result is collection
    assert result.values() == [2, 3, 4, 5, 6]


def test_each_passes_key_and_collection() -> None:
    collection = Collection({"a": 1, "b": 2})
    seen = []

    def record(value: int, key: str, coll: Collection) -> int:
        seen.append((key, value, coll))
        return value * 10

    _ = collection.each(record)
    assert seen == [("a", 1, collection), ("b", 2, collection)]
    assert collection.raw() == {"a": 10, "b": 20}


def test_each_walks_keys_captured_at_start() -> None:
    collection = Collection([1, 2])

    def grow(value: int, _key: int, coll: Collection) -> int:
        coll[None] = 0
        return value * 2

    _ = collection.each(grow)
    assert collection.values() == [2, 4, 0, 0]


def test_map_returns_new_collection() -> None:
    collection = Collection([1, 2, 3, 4, 5])
    result = collection.map(lambda item: item + 1)

    assert result is not collection
    assert isinstance(result, Collection)
    assert result.values() == [2, 3, 4, 5, 6]
    assert collection.values() == [1, 2, 3, 4, 5]


def test_map_keeps_keys() -> None:
    result = Collection({"a": 1, 7: 2}).map(str)
    assert result.items() == [("a", "1"), (7, "2")]


def test_filter_with_callable() -> None:
    collection = Collection([1] * 10 + [2] * 10)
    result = collection.filter(lambda item: item == 1)

    assert isinstance(result, Collection)
    assert result is not collection
    assert result.values() == [1] * 10
    assert len(collection) == 20


def test_filter_keeps_keys_and_order() -> None:
    result = Collection([5, 6, 7, 8]).filter(lambda item: item % 2 == 0)
    assert result.keys() == [1, 3]


def test_filter_with_key() -> None:
    collection = Collection({"keep": 1, "drop": 2, "keep_too": 3})
    result = collection.filter(lambda _value, key, _coll: key.startswith("keep"), with_key=True)
    assert result.keys() == ["keep", "keep_too"]


def test_filter_by_field_values() -> None:
    collection = Collection(
        [
            {"name": "alice", "role": "admin"},
            SimpleNamespace(name="bob", role="admin"),
            {"name": "carol", "role": "user"},
            {"name": "dave"},
        ]
    )
    result = collection.filter({"role": "admin"})
    assert result.keys() == [0, 1]

    result = collection.filter({"role": "admin", "name": "bob"})
    assert result.keys() == [1]


def test_filter_without_predicate_keeps_truthy_values() -> None:
    result = Collection([0, 1, "", "a", None, [], [0]]).filter()
    assert result.values() == [1, "a", [0]]


def test_find_is_filter() -> None:
    result = Collection([1, 2, 3]).find(lambda item: item > 1)
    assert result.values() == [2, 3]


def test_reduce_with_initial() -> None:
    collection = Collection([1, 2, 3])

    def add(memo: int, item: int) -> int:
        return memo + item

    assert collection.reduce(add, 0) == 6
    assert collection.reduce(add, 1) == 7


def test_reduce_without_initial() -> None:
    assert Collection([5, 6, 7]).reduce(lambda memo, _item: (memo or 0) + 1) == 3
    seen = []
    _ = Collection([1, 2]).reduce(lambda memo, item: seen.append((memo, item)))
    assert seen == [(None, 1), (None, 2)]
    assert Collection().reduce(lambda memo, item: memo + item) is None
    assert Collection().reduce(lambda memo, item: memo + item, 5) == 5


def test_reduce_propagates_callback_errors() -> None:
    def fail(_memo: int, _item: int) -> int:
        msg = "boom"
        raise RuntimeError(msg)

    with pytest.raises(RuntimeError, match="boom"):
        _ = Collection([1, 2]).reduce(fail, 0)


def test_slice_returns_new_collection() -> None:
    collection = Collection([1, 2, 3, 4, 5])
    result = collection.slice(2, 2)

    assert result is not collection
    assert result.values() == [3, 4]
    assert result.keys() == [2, 3]
    assert collection.values() == [1, 2, 3, 4, 5]


def test_slice_without_key_preservation() -> None:
    result = Collection({"a": 1, "b": 2, "c": 3}).slice(1, preserve_keys=False)
    assert result.items() == [(0, 2), (1, 3)]


def test_slice_negative_offset_and_length() -> None:
    collection = Collection([1, 2, 3, 4, 5])
    assert collection.slice(-2).values() == [4, 5]
    assert collection.slice(1, -1).values() == [2, 3, 4]
    assert collection.slice(-10, 2).values() == [1, 2]
    assert collection.slice(10).values() == []
    assert collection.slice(3, -3).values() == []
    assert collection.slice(0, -6).values() == []


def test_merge_without_key_preservation_rekeys_from_zero() -> None:
    collection = Collection([1, 2, 3])
    result = collection.merge(Collection([4, 5, 6, 7]))

    assert result is collection
    assert collection.values() == [4, 5, 6, 7]


def test_merge_without_key_preservation_overwrites_by_position() -> None:
    collection = Collection([1, 2, 3, 4, 5])
    _ = collection.merge({"x": 9, "y": 8})
    assert collection.values() == [9, 8, 3, 4, 5]


def test_merge_with_key_preservation() -> None:
    collection = Collection({"a": 1, "b": 2})
    _ = collection.merge(Collection({"b": 20, "c": 30}), preserve_keys=True)
    assert collection.items() == [("a", 1), ("b", 20), ("c", 30)]


def test_append_never_overwrites() -> None:
    collection = Collection([1, 2, 3])
    result = collection.append(Collection([4, 5, 6, 7]))

    assert result is collection
    assert collection.values() == [1, 2, 3, 4, 5, 6, 7]
    assert collection.keys() == [0, 1, 2, 3, 4, 5, 6]


def test_append_continues_after_string_and_sparse_keys() -> None:
    collection = Collection({"a": 1, 10: 2})
    _ = collection.append({"x": 3, "y": 4})
    assert collection.keys() == ["a", 10, 11, 12]


def test_clear_resets_entries_and_auto_keys() -> None:
    collection = Collection([1, 2, 3])
    assert collection.values() == [1, 2, 3]

    assert collection.clear() is collection
    assert collection.values() == []

    collection[None] = "again"
    assert collection.keys() == [0]


def test_invoke_dispatches_to_all_items() -> None:
    collection = Collection()
    for _ in range(5):
        collection[None] = Greeter()

    result = collection.invoke("hello")

    assert result is not collection
    assert result.values() == ["hello world"] * 5
    assert result.keys() == collection.keys()
    assert all(greeter.calls == 1 for greeter in collection.values())


def test_invoke_with_fixed_params() -> None:
    collection = Collection({"a": Greeter(), "b": Greeter()})
    result = collection.invoke("hello", ["bob"])
    assert result.items() == [("a", "hello bob"), ("b", "hello bob")]


def test_invoke_with_param_builder() -> None:
    collection = Collection({"a": Greeter(), "b": Greeter()})
    result = collection.invoke("hello", lambda _value, key, _coll: [key.upper()])
    assert result.values() == ["hello A", "hello B"]


def test_invoke_unsupported_element_raises_before_any_call() -> None:
    greeter = Greeter()
    collection = Collection([greeter, object()])

    with pytest.raises(UnsupportedOperation, match="has no callable `hello`"):
        _ = collection.invoke("hello")
    assert greeter.calls == 0


def test_invoke_non_callable_attribute_is_unsupported() -> None:
    collection = Collection([SimpleNamespace(hello="not callable")])
    with pytest.raises(UnsupportedOperation):
        _ = collection.invoke("hello")


def test_invoke_unsupported_operation_is_a_type_error() -> None:
    with pytest.raises(TypeError):
        _ = Collection([1]).invoke("hello")


def test_derived_collections_keep_subclass() -> None:
    class Bag(Collection):
        pass

    bag = Bag([3, 1, 2])
    assert type(bag.map(abs)) is Bag
    assert type(bag.filter()) is Bag
    assert type(bag.slice(1)) is Bag
    assert type(bag.sort()) is Bag


@given(values=st.lists(st.integers(), max_size=20), offset=st.integers(-25, 25), length=st.none() | st.integers(-25, 25))
def test_derived_operations_do_not_mutate_receiver(values: list[int], offset: int, length: int | None) -> None:
    collection = Collection(values)

    mapped = collection.map(lambda item: item * 2)
    filtered = collection.filter(lambda item: item > 0)
    sliced = collection.slice(offset, length)

    for result in (mapped, filtered, sliced):
        assert result is not collection
    assert collection.values() == values
    assert collection.keys() == list(range(len(values)))
    assert sliced.values() == values[offset:][:length]
