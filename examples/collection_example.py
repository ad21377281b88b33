"""Minimal example for Collection: cursor iteration, functional helpers and exports."""

import json

from kv_collection import Collection


def main() -> None:
    """Run a basic access/iterate/transform/export flow."""
    words = Collection(["Delete me", "Hello", "Delete me", "Hello again!"])
    print(f"{words=}")

    for key in words:
        if words[key] == "Delete me":
            del words[key]
    print("after delete:", words.values())

    numbers = Collection([5, 3, 4, 1, 2])
    print("sorted:", numbers.sort().values())
    print("doubled:", numbers.map(lambda item: item * 2).values())
    print("sum:", numbers.reduce(lambda memo, item: memo + item, 0))

    nested = Collection({"numbers": numbers, "words": words})
    _ = Collection.formats("json", lambda coll, _options: json.dumps(coll.to("array")))
    print("json:", nested.to("json"))


if __name__ == "__main__":
    main()
