"""
Tests BlockStore — add/update/remove/move + invariant d'ordre dense.
Parcours de base + propriétés sur séquences d'opérations aléatoires.
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import random
import threading

import pytest

from page_blocks import BLOCK_TYPES, BlockStore, InvalidConfig, NotFound, assert_order_dense
from page_blocks.blocks import GalleryConfig, TextConfig
from page_blocks.errors import BlockError


def _ids():
    n = iter(range(1, 10_000))
    return lambda: f"b{next(n)}"


@pytest.fixture
def store():
    return BlockStore(id_factory=_ids())


def _types(store):
    return [b.type for b in store.to_sequence()]


def _orders(store):
    return [b.order for b in store.to_sequence()]


# ── Parcours de base ──────────────────────────────────────────────────────

def test_add_text_to_empty_page(store):
    blk = store.add("text")
    assert len(store) == 1
    assert blk.order == 0
    assert blk.config.model_dump(by_alias=True) == {"content": "", "alignment": "left", "fontSize": "medium"}


def test_move_up_last_block(store):
    store.add("text"); store.add("gallery"); store.add("stats")
    assert _orders(store) == [0, 1, 2]
    store.move_up(2)
    assert _types(store) == ["text", "stats", "gallery"]
    assert _orders(store) == [0, 1, 2]


def test_remove_middle_block(store):
    a = store.add("text"); b = store.add("cta"); c = store.add("stats")
    store.remove(b.id)
    seq = store.to_sequence()
    assert [x.id for x in seq] == [a.id, c.id]
    assert _orders(store) == [0, 1]


def test_update_gallery_grid_view(store):
    store.add("text")
    g = store.add("gallery")
    store.update(g.id, {"title": "Photos", "images": ["/a.png", "/b.png"]})

    cfg = store.get(g.id).config.model_dump(by_alias=True)
    cfg["gridView"] = 4
    updated = store.update(g.id, cfg)

    assert updated.config.grid_view == 4
    assert updated.id == g.id
    assert updated.type == "gallery"
    assert updated.order == 1
    assert updated.config.images == ["/a.png", "/b.png"]


def test_update_unknown_id(store):
    store.add("text")
    before = store.to_sequence()
    with pytest.raises(NotFound):
        store.update("nope", {"content": "x"})
    assert store.to_sequence() == before


# ── add ───────────────────────────────────────────────────────────────────

def test_add_every_variant(store):
    for t in BLOCK_TYPES:
        store.add(t)
    assert _types(store) == list(BLOCK_TYPES)
    assert _orders(store) == list(range(len(BLOCK_TYPES)))


def test_add_ids_unique_even_on_collision():
    ids = iter(["dup", "dup", "other"])
    store = BlockStore(id_factory=lambda: next(ids))
    a = store.add("text")
    b = store.add("text")
    assert a.id == "dup"
    assert b.id == "other"


def test_add_unknown_type_is_programming_error(store):
    with pytest.raises(TypeError):
        store.add("video")


def test_default_ids_are_opaque_and_distinct():
    store = BlockStore()
    a, b = store.add("text"), store.add("text")
    assert a.id.startswith("block-")
    assert a.id != b.id


# ── update ────────────────────────────────────────────────────────────────

def test_update_replaces_config_wholesale(store):
    t = store.add("text")
    store.update(t.id, {"content": "Hello", "alignment": "right", "fontSize": "large"})
    store.update(t.id, {"content": "Bye"})
    cfg = store.get(t.id).config
    assert cfg.content == "Bye"
    assert cfg.alignment == "left"
    assert cfg.font_size == "medium"


def test_update_accepts_config_model(store):
    t = store.add("text")
    store.update(t.id, TextConfig(content="Hi", alignment="center"))
    assert store.get(t.id).config.alignment == "center"


def test_update_wrong_variant_model_rejected(store):
    t = store.add("text")
    with pytest.raises(InvalidConfig):
        store.update(t.id, GalleryConfig(title="x"))


def test_update_invalid_enum_leaves_store_unchanged(store):
    t = store.add("text")
    before = store.to_sequence()
    with pytest.raises(InvalidConfig):
        store.update(t.id, {"content": "x", "alignment": "justify"})
    assert store.to_sequence() == before


def test_update_missing_required_field(store):
    c = store.add("cta")
    with pytest.raises(InvalidConfig):
        store.update(c.id, {"title": "Join"})
    g = store.add("gallery")
    with pytest.raises(InvalidConfig):
        store.update(g.id, {"gridView": 2})


def test_update_grid_view_out_of_range(store):
    g = store.add("gallery")
    with pytest.raises(InvalidConfig):
        store.update(g.id, {"title": "x", "gridView": 5})


def test_update_non_mapping_rejected(store):
    t = store.add("text")
    with pytest.raises(InvalidConfig):
        store.update(t.id, ["content"])


def test_update_keeps_id_type_order(store):
    store.add("text")
    s = store.add("stats")
    out = store.update(s.id, {"layout": "grid", "stats": [{"label": "Members", "value": "120"}]})
    assert (out.id, out.type, out.order) == (s.id, "stats", 1)


# ── remove ────────────────────────────────────────────────────────────────

def test_remove_unknown_id(store):
    store.add("text")
    before = store.to_sequence()
    with pytest.raises(NotFound):
        store.remove("missing")
    assert store.to_sequence() == before


def test_remove_returns_removed_block(store):
    t = store.add("text")
    assert store.remove(t.id).id == t.id
    assert len(store) == 0


def test_removal_preserves_relative_order(store):
    blocks = [store.add(t) for t in ("text", "gallery", "events", "stats", "cta")]
    store.remove(blocks[1].id)
    store.remove(blocks[3].id)
    assert [b.id for b in store.to_sequence()] == [blocks[0].id, blocks[2].id, blocks[4].id]
    assert _orders(store) == [0, 1, 2]


# ── move ──────────────────────────────────────────────────────────────────

def test_move_up_first_is_noop(store):
    store.add("text"); store.add("cta")
    before = store.to_sequence()
    store.move_up(0)
    assert store.to_sequence() == before


def test_move_down_last_is_noop(store):
    store.add("text"); store.add("cta")
    before = store.to_sequence()
    store.move_down(1)
    assert store.to_sequence() == before


def test_move_out_of_range_is_noop(store):
    store.add("text")
    before = store.to_sequence()
    store.move_up(5); store.move_down(-1); store.move_down(7)
    assert store.to_sequence() == before


def test_move_down_swaps_neighbours(store):
    store.add("text"); store.add("gallery"); store.add("stats")
    store.move_down(0)
    assert _types(store) == ["gallery", "text", "stats"]


def test_move_general(store):
    for t in ("text", "gallery", "events", "stats"):
        store.add(t)
    store.move(0, 3)
    assert _types(store) == ["gallery", "events", "stats", "text"]
    assert _orders(store) == [0, 1, 2, 3]
    with pytest.raises(IndexError):
        store.move(0, 4)


def test_boundary_noop_does_not_notify(store):
    store.add("text")
    calls = []
    store.subscribe(calls.append)
    store.move_up(0)
    store.move_down(0)
    assert calls == []


# ── Propriétés ────────────────────────────────────────────────────────────

@pytest.mark.parametrize("seed", range(20))
def test_order_density_after_random_operations(seed):
    rnd = random.Random(seed)
    store = BlockStore(id_factory=_ids())
    for _ in range(60):
        op = rnd.choice(["add", "add", "remove", "up", "down", "move", "update"])
        n = len(store)
        if op == "add" or n == 0:
            store.add(rnd.choice(BLOCK_TYPES))
        elif op == "remove":
            store.remove(store.to_sequence()[rnd.randrange(n)].id)
        elif op == "up":
            store.move_up(rnd.randrange(n))
        elif op == "down":
            store.move_down(rnd.randrange(n))
        elif op == "move":
            store.move(rnd.randrange(n), rnd.randrange(n))
        else:
            blk = store.to_sequence()[rnd.randrange(n)]
            store.update(blk.id, blk.config)
        seq = store.to_sequence()
        assert [b.order for b in seq] == list(range(len(seq)))


@pytest.mark.parametrize("seed", range(10))
def test_stability_under_removal(seed):
    rnd = random.Random(seed)
    store = BlockStore(id_factory=_ids())
    for _ in range(8):
        store.add(rnd.choice(BLOCK_TYPES))
    before = [b.id for b in store.to_sequence()]
    victim = rnd.choice(before)
    store.remove(victim)
    assert [b.id for b in store.to_sequence()] == [i for i in before if i != victim]


# ── Propriété exclusive / listeners ───────────────────────────────────────

def test_sequence_returns_copies(store):
    t = store.add("text")
    seq = store.to_sequence()
    seq[0].config.content = "mutated outside"
    seq[0].order = 42
    assert store.get(t.id).config.content == ""
    assert store.get(t.id).order == 0


def test_initial_blocks_sorted_and_renumbered():
    source = BlockStore(id_factory=_ids())
    a, b, c = source.add("text"), source.add("cta"), source.add("stats")
    shuffled = [c.model_copy(update={"order": 9}), a.model_copy(update={"order": 2}), b.model_copy(update={"order": 5})]
    store = BlockStore(shuffled)
    assert [x.id for x in store.to_sequence()] == [a.id, b.id, c.id]
    assert_order_dense(store.to_sequence())


def test_initial_duplicate_ids_rejected():
    source = BlockStore(id_factory=_ids())
    a = source.add("text")
    with pytest.raises(BlockError):
        BlockStore([a, a.model_copy(update={"order": 1})])


def test_listeners_notified_with_sequence(store):
    seen = []
    unsubscribe = store.subscribe(lambda seq: seen.append([b.type for b in seq]))
    store.add("text")
    store.add("cta")
    store.move_up(1)
    unsubscribe()
    store.add("stats")
    assert seen == [["text"], ["text", "cta"], ["cta", "text"]]


def test_failing_listener_does_not_break_store(store):
    def boom(_):
        raise RuntimeError("ui crashed")
    store.subscribe(boom)
    store.add("text")
    assert len(store) == 1


def test_assert_order_dense_detects_gap(store):
    store.add("text"); store.add("cta")
    seq = store.to_sequence()
    seq[1].order = 3
    with pytest.raises(BlockError):
        assert_order_dense(seq)


def test_unsubscribe_twice_is_harmless(store):
    calls = []
    unsubscribe = store.subscribe(calls.append)
    unsubscribe()
    unsubscribe()
    store.add("text")
    assert calls == []


def test_listeners_run_outside_store_lock(store):
    t = store.add("text")
    g = store.add("gallery")
    done = []

    def slow_listener(_):
        if done:
            return
        done.append(True)
        # un autre thread (fin d'upload) doit pouvoir muter le store pendant la notification
        worker = threading.Thread(target=lambda: store.update(g.id, {"title": "From thread"}))
        worker.start()
        worker.join(timeout=2)
        done.append(worker.is_alive())

    store.subscribe(slow_listener)
    store.update(t.id, {"content": "Hi"})
    assert done == [True, False]
    assert store.get(g.id).config.title == "From thread"


# ── set_asset ─────────────────────────────────────────────────────────────

def test_set_asset_compare_and_set(store):
    g = store.add("gallery")
    store.update(g.id, {"title": "Photos", "images": ["/a.png", "/b.png"]})

    store.set_asset(g.id, 1, "/new.png", expected="/b.png")
    assert store.get(g.id).config.images == ["/a.png", "/new.png"]

    before = store.to_sequence()
    with pytest.raises(InvalidConfig):
        store.set_asset(g.id, 0, "/other.png", expected="/b.png")
    assert store.to_sequence() == before


def test_set_asset_empty_slot_matches_none(store):
    l = store.add("leadership")
    store.update(l.id, {"members": [{"name": "Ada"}]})
    store.set_asset(l.id, 0, "/ada.png", expected="")
    assert store.get(l.id).config.members[0].image_url == "/ada.png"


def test_set_asset_out_of_range_slot(store):
    g = store.add("gallery")
    with pytest.raises(InvalidConfig):
        store.set_asset(g.id, 0, "/a.png")
