"""
In-memory stand-in for AsyncElasticsearch used by the tests.
Understands the subset of the query DSL the app sends: match_all, bool(must/filter),
multi_match, term, range, terms/range aggregations, sort on createdAt.
"""

import copy
import re
from typing import Any

from elastic_transport import ConnectionError as ESConnectionError

_TOKEN = re.compile(r"\w+")


def _tokens(value: Any) -> set[str]:
    if value is None:
        return set()
    return {t.lower() for t in _TOKEN.findall(str(value))}


def _field_value(source: dict[str, Any], field: str) -> Any:
    # category.text / brand.text are analyzed views of the keyword field
    base = field.split("^", 1)[0]
    if base.endswith(".text") or base.endswith(".keyword"):
        base = base.rsplit(".", 1)[0]
    return source.get(base)


def _in_range(value: Any, bounds: dict[str, Any]) -> bool:
    if value is None:
        return False
    if "gte" in bounds and not value >= bounds["gte"]:
        return False
    if "gt" in bounds and not value > bounds["gt"]:
        return False
    if "lte" in bounds and not value <= bounds["lte"]:
        return False
    if "lt" in bounds and not value < bounds["lt"]:
        return False
    return True


def _matches(query: dict[str, Any], source: dict[str, Any]) -> bool:
    if "match_all" in query:
        return True
    if "bool" in query:
        clauses = query["bool"].get("must", []) + query["bool"].get("filter", [])
        return all(_matches(c, source) for c in clauses)
    if "multi_match" in query:
        wanted = _tokens(query["multi_match"]["query"])
        present: set[str] = set()
        for field in query["multi_match"]["fields"]:
            present |= _tokens(_field_value(source, field))
        return bool(wanted & present)
    if "term" in query:
        ((field, value),) = query["term"].items()
        return source.get(field) == value
    if "range" in query:
        ((field, bounds),) = query["range"].items()
        return _in_range(source.get(field), bounds)
    raise ValueError(f"unsupported query: {query}")


class FakeIndices:
    def __init__(self, es: "FakeElasticsearch"):
        self.es = es

    async def exists(self, index: str) -> bool:
        return index in self.es.indices_created

    async def create(self, index: str, **kwargs: Any) -> dict[str, Any]:
        self.es.indices_created[index] = kwargs
        return {"acknowledged": True, "index": index}

    async def delete(self, index: str) -> dict[str, Any]:
        self.es.indices_created.pop(index, None)
        self.es.docs.clear()
        return {"acknowledged": True}

    async def stats(self, index: str) -> dict[str, Any]:
        return {
            "indices": {
                index: {
                    "total": {
                        "docs": {"count": len(self.es.docs)},
                        "store": {"size_in_bytes": 1024 * len(self.es.docs)},
                    }
                }
            }
        }


class FakeElasticsearch:
    def __init__(self):
        self.docs: dict[str, dict[str, Any]] = {}
        self.indices_created: dict[str, Any] = {}
        self.indices = FakeIndices(self)
        self.search_calls: list[dict[str, Any]] = []
        self.bulk_calls: list[list[dict[str, Any]]] = []
        # ids the fake bulk endpoint rejects, to exercise partial failures
        self.reject_ids: set[str] = set()
        self.unavailable = False

    def _check(self) -> None:
        if self.unavailable:
            raise ESConnectionError("Connection refused")

    def options(self, **kwargs: Any) -> "FakeElasticsearch":
        return self

    async def info(self) -> dict[str, Any]:
        self._check()
        return {"cluster_name": "test-cluster", "version": {"number": "8.13.0"}}

    async def index(self, index: str, id: str, document: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        self._check()
        result = "updated" if id in self.docs else "created"
        self.docs[id] = copy.deepcopy(document)
        return {"_index": index, "_id": id, "result": result}

    async def get(self, index: str, id: str, **kwargs: Any) -> dict[str, Any]:
        self._check()
        if id not in self.docs:
            return {"_index": index, "_id": id, "found": False}
        return {"_index": index, "_id": id, "found": True, "_source": copy.deepcopy(self.docs[id])}

    async def delete(self, index: str, id: str, **kwargs: Any) -> dict[str, Any]:
        self._check()
        if self.docs.pop(id, None) is None:
            return {"_index": index, "_id": id, "result": "not_found"}
        return {"_index": index, "_id": id, "result": "deleted"}

    async def bulk(self, operations: list[dict[str, Any]], **kwargs: Any) -> dict[str, Any]:
        self._check()
        self.bulk_calls.append(operations)
        items = []
        errors = False
        for action, document in zip(operations[::2], operations[1::2]):
            doc_id = action["index"]["_id"]
            if doc_id in self.reject_ids:
                errors = True
                items.append(
                    {
                        "index": {
                            "_id": doc_id,
                            "status": 400,
                            "error": {"type": "mapper_parsing_exception", "reason": "failed to parse"},
                        }
                    }
                )
                continue
            self.docs[doc_id] = copy.deepcopy(document)
            items.append({"index": {"_id": doc_id, "status": 201, "result": "created"}})
        return {"took": 1, "errors": errors, "items": items}

    async def search(
        self,
        index: str,
        query: dict[str, Any],
        sort: list[dict[str, Any]] | None = None,
        from_: int = 0,
        size: int = 10,
        aggs: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        self._check()
        self.search_calls.append({"query": query, "sort": sort, "from_": from_, "size": size, "aggs": aggs})
        matched = [(doc_id, src) for doc_id, src in self.docs.items() if _matches(query, src)]
        # Every match scores the same here, so ordering falls to createdAt desc
        matched.sort(key=lambda pair: pair[1].get("createdAt") or "", reverse=True)
        page = matched[from_:from_ + size]
        body: dict[str, Any] = {
            "hits": {
                "total": {"value": len(matched), "relation": "eq"},
                "hits": [
                    {"_id": doc_id, "_score": 1.0, "_source": copy.deepcopy(src)} for doc_id, src in page
                ],
            }
        }
        if aggs:
            body["aggregations"] = self._aggregate(aggs, [src for _, src in matched])
        return body

    @staticmethod
    def _aggregate(aggs: dict[str, Any], sources: list[dict[str, Any]]) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for name, agg in aggs.items():
            if "terms" in agg:
                field = agg["terms"]["field"]
                counts: dict[str, int] = {}
                for src in sources:
                    if src.get(field) is not None:
                        counts[src[field]] = counts.get(src[field], 0) + 1
                buckets = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
                out[name] = {"buckets": [{"key": k, "doc_count": c} for k, c in buckets]}
            elif "range" in agg:
                field = agg["range"]["field"]
                buckets = []
                for r in agg["range"]["ranges"]:
                    bounds = {}
                    if "from" in r:
                        bounds["gte"] = r["from"]
                    if "to" in r:
                        bounds["lt"] = r["to"]
                    bucket = {
                        "key": r.get("key"),
                        "doc_count": sum(1 for s in sources if _in_range(s.get(field), bounds)),
                    }
                    if "from" in r:
                        bucket["from"] = float(r["from"])
                    if "to" in r:
                        bucket["to"] = float(r["to"])
                    buckets.append(bucket)
                out[name] = {"buckets": buckets}
        return out

    async def close(self) -> None:
        pass
