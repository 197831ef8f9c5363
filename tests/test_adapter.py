"""Tests for container classification and traversal plans."""

import pickle
from collections import OrderedDict, defaultdict
from types import MappingProxyType, SimpleNamespace

import pytest

from aioessentials import (
    NOT_FOUND,
    AccessMode,
    ContainerShape,
    IterationConfig,
    UnsupportedContainerKind,
    prepare_iteration,
)
from aioessentials.core import (
    ArrayLikeAdapter,
    MappingAdapter,
    OrderedMapAdapter,
    SequenceAdapter,
    MapCollector,
    SearchCollector,
    adapter_for,
)


class ArrayLike:
    """Minimal array-like exposing only len() and indexing."""

    def __init__(self, *items):
        self._items = list(items)

    def __len__(self):
        return len(self._items)

    def __getitem__(self, index):
        return self._items[index]


class Record:
    """Plain object whose attributes are traversed by name."""

    def __init__(self):
        self.first = 1
        self.second = 2
        self.third = 3


class TestClassification:
    """Every container must land in exactly one shape."""

    def test_list_is_sequence(self):
        plan = prepare_iteration([1, 2, 3])
        assert plan.shape is ContainerShape.SEQUENCE
        assert plan.access_mode is AccessMode.INDEXED
        assert plan.keys is None
        assert plan.count == 3

    def test_tuple_and_string_are_sequences(self):
        assert adapter_for((1, 2)).shape is ContainerShape.SEQUENCE
        assert adapter_for("abc").shape is ContainerShape.SEQUENCE
        assert prepare_iteration("abc").count == 3

    def test_dict_is_ordered_map(self):
        plan = prepare_iteration({'b': 2, 'a': 1})
        assert plan.shape is ContainerShape.ORDERED_MAP
        assert plan.access_mode is AccessMode.GET_BY_KEY
        assert plan.keys == ['b', 'a']
        assert plan.count == 2

    def test_plain_object_is_mapping(self):
        plan = prepare_iteration(Record())
        assert plan.shape is ContainerShape.MAPPING
        assert plan.access_mode is AccessMode.NAMED
        assert plan.keys == ['first', 'second', 'third']

    def test_namespace_is_mapping(self):
        plan = prepare_iteration(SimpleNamespace(x=1, y=2))
        assert plan.shape is ContainerShape.MAPPING
        assert plan.read('y') == 2

    def test_array_like(self):
        plan = prepare_iteration(ArrayLike('a', 'b'))
        assert plan.shape is ContainerShape.ARRAY_LIKE
        assert plan.access_mode is AccessMode.INDEXED
        assert plan.count == 2
        assert plan.read(1) == 'b'

    def test_mapping_checked_before_array_like(self):
        """Dicts have len() and indexing but must stay mappings."""
        assert isinstance(adapter_for({}), OrderedMapAdapter)

    def test_adapter_types(self):
        assert isinstance(adapter_for([]), SequenceAdapter)
        assert isinstance(adapter_for(ArrayLike()), ArrayLikeAdapter)
        assert isinstance(adapter_for(Record()), MappingAdapter)

    @pytest.mark.parametrize('value', [42, 3.5, None, {1, 2}, len, ArrayLike])
    def test_unsupported_values_rejected(self, value):
        with pytest.raises(UnsupportedContainerKind) as exc_info:
            prepare_iteration(value)
        assert isinstance(exc_info.value, TypeError)
        assert exc_info.value.container_type is type(value)

    def test_empty_containers(self):
        assert prepare_iteration([]).count == 0
        assert prepare_iteration({}).count == 0
        assert prepare_iteration(SimpleNamespace()).count == 0


class TestTraversalPlan:
    """Plans translate positions into keys and build collectors."""

    def test_positions_forward_and_backward(self):
        plan = prepare_iteration(['a', 'b', 'c'])
        assert list(plan.positions()) == [0, 1, 2]
        assert list(plan.positions(reverse=True)) == [2, 1, 0]

    def test_key_at(self):
        assert prepare_iteration(['a', 'b']).key_at(1) == 1
        assert prepare_iteration({'x': 1, 'y': 2}).key_at(1) == 'y'

    def test_plan_is_not_refreshed(self):
        items = [1, 2]
        plan = prepare_iteration(items)
        items.append(3)
        assert plan.count == 2

    def test_no_collector_unless_requested(self):
        assert prepare_iteration([1]).collector is None

    def test_as_array_collector_is_list(self):
        for container in ([1], {'a': 1}, Record(), ArrayLike(1)):
            plan = prepare_iteration(container, IterationConfig.for_collect(as_array=True))
            assert plan.collector == []

    def test_same_family_collectors(self):
        config = IterationConfig.for_collect(as_array=False)

        assert prepare_iteration([1], config).collector == []
        assert prepare_iteration({'a': 1}, config).collector == {}
        assert type(prepare_iteration(OrderedDict(a=1), config).collector) is OrderedDict
        assert isinstance(prepare_iteration(Record(), config).collector, SimpleNamespace)

    def test_array_like_never_used_as_output_family(self):
        plan = prepare_iteration(ArrayLike(1, 2), IterationConfig.for_collect(as_array=False))
        assert plan.collector == []

    def test_mapping_collector_falls_back_to_dict(self):
        config = IterationConfig.for_collect(as_array=False)

        proxy = MappingProxyType({'a': 1})
        assert type(prepare_iteration(proxy, config).collector) is dict

        counts = defaultdict(int, a=1)
        assert type(prepare_iteration(counts, config).collector) is defaultdict

    def test_take_collector_hands_out_once(self):
        plan = prepare_iteration([1], IterationConfig.for_collect())
        first = plan.collector
        assert plan.take_collector() is first
        assert plan.take_collector() is not first

    def test_collectors_start_fresh_on_construction(self):
        plan = prepare_iteration([1, 2], IterationConfig.for_collect())
        prepared = plan.collector

        assert MapCollector(plan).target is prepared
        assert MapCollector(plan).target == []

        search = SearchCollector(plan)
        assert search.found_key is NOT_FOUND
        assert search.found_value is NOT_FOUND


class TestNotFound:
    """The not-found sentinel is distinct from any element value."""

    def test_falsy_and_distinct(self):
        assert not NOT_FOUND
        assert NOT_FOUND is not None
        assert NOT_FOUND != -1
        assert repr(NOT_FOUND) == 'NOT_FOUND'

    def test_singleton_survives_pickling(self):
        assert pickle.loads(pickle.dumps(NOT_FOUND)) is NOT_FOUND
