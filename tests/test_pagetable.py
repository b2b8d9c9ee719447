import pytest

from oslab.pagetable import (
    ENTRIES_PER_TABLE,
    FRAME_BASE,
    NO_MAPPING,
    OutOfMemoryError,
    PageTable,
    PhysicalMemory,
    main,
    page_table_query,
    page_table_update,
)


@pytest.fixture
def table():
    return PageTable()


def test_source_scenario(table):
    assert table.query(0xCAFECAFEEEE) == NO_MAPPING
    assert table.query(0xFFFECAFEEEE) == NO_MAPPING
    assert table.query(0xCAFECAFEEFF) == NO_MAPPING
    table.update(0xCAFECAFEEEE, 0xF00D)
    assert table.query(0xCAFECAFEEEE) == 0xF00D
    assert table.query(0xFFFECAFEEEE) == NO_MAPPING
    assert table.query(0xCAFECAFEEFF) == NO_MAPPING
    table.update(0xCAFECAFEEEE, NO_MAPPING)
    assert table.query(0xCAFECAFEEEE) == NO_MAPPING
    assert table.query(0xFFFECAFEEEE) == NO_MAPPING
    assert table.query(0xCAFECAFEEFF) == NO_MAPPING


def test_main_returns_zero():
    assert main([]) == 0


def test_first_frame_number_uses_base():
    memory = PhysicalMemory()
    assert memory.alloc_page_frame() == FRAME_BASE
    assert memory.alloc_page_frame() == FRAME_BASE + 1


def test_frame_is_zeroed_and_sized():
    memory = PhysicalMemory()
    frame = memory.frame(memory.alloc_page_frame())
    assert len(frame) == ENTRIES_PER_TABLE
    assert all(entry == 0 for entry in frame)


def test_unknown_frame_raises():
    memory = PhysicalMemory()
    memory.alloc_page_frame()
    with pytest.raises(ValueError):
        memory.frame(FRAME_BASE + 1)
    with pytest.raises(ValueError):
        memory.frame(FRAME_BASE - 1)


def test_out_of_memory():
    memory = PhysicalMemory(npages=2)
    table = PageTable(memory)
    with pytest.raises(OutOfMemoryError):
        table.update(0x1234, 0x99)


def test_query_does_not_allocate(table):
    before = len(table.memory)
    assert table.query(0x123456789) == NO_MAPPING
    assert len(table.memory) == before


def test_update_allocates_intermediate_tables(table):
    table.update(0x123456789, 0x42)
    assert len(table.memory) == 5
    after_first = len(table.memory)
    table.update(0x12345678A, 0x43)
    assert len(table.memory) == after_first


def test_many_mappings_round_trip(table):
    mappings = {vpn: vpn * 7 + 3 for vpn in (0, 1, 0x1FF, 0x200, 0x3FFFF, 0x1FFFFFFFFFFF, 0xABCDEF0123)}
    for vpn, ppn in mappings.items():
        table.update(vpn, ppn)
    for vpn, ppn in mappings.items():
        assert table.query(vpn) == ppn


def test_unmap_leaves_neighbours(table):
    table.update(0x1000, 0xAA)
    table.update(0x1001, 0xBB)
    table.update(0x1000, None)
    assert table.query(0x1000) == NO_MAPPING
    assert table.query(0x1001) == 0xBB


def test_remap_overwrites(table):
    table.update(0x777, 0x1)
    table.update(0x777, 0x2)
    assert table.query(0x777) == 0x2


def test_functions_share_state_with_class(table):
    page_table_update(table.memory, table.root, 0xBEEF, 0xD00D)
    assert table.query(0xBEEF) == 0xD00D
    table.update(0xBEEF, NO_MAPPING)
    assert page_table_query(table.memory, table.root, 0xBEEF) == NO_MAPPING


def test_negative_vpn_rejected(table):
    with pytest.raises(ValueError):
        table.update(-1, 5)
    with pytest.raises(ValueError):
        table.query(-1)