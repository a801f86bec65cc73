import json
from typing import Any, Callable

from essentials.json import dumps

LoadsFunc = Callable[[str], Any]
DumpsFunc = Callable[[Any], str]


def compact_json_dumps(obj: Any) -> str:
    return dumps(obj, ensure_ascii=False, separators=(",", ":"))


def indented_json_dumps(obj: Any) -> str:
    return dumps(obj, ensure_ascii=False, indent=4)


class JSONSettings:
    """
    Functions used to serialize stashes to JSON and to read them back. They can
    be replaced at runtime with `use`, for example to use orjson.
    """

    def __init__(self):
        self.use()

    def use(
        self,
        loads: LoadsFunc = json.loads,
        dumps: DumpsFunc = compact_json_dumps,
        pretty_dumps: DumpsFunc = indented_json_dumps,
    ) -> None:
        self._loads = loads
        self._dumps = dumps
        self._pretty_dumps = pretty_dumps

    def loads(self, text: str) -> Any:
        return self._loads(text)

    def dumps(self, obj: Any, pretty: bool = False) -> str:
        if pretty:
            return self._pretty_dumps(obj)
        return self._dumps(obj)


json_settings = JSONSettings()
