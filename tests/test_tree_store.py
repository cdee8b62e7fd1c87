import pytest
from datetime import datetime
from app.core.errors import PageNotFound
from app.models.page import Page
from app.services import tree_store
from app.services.ids import new_id


def add_page(db, workspace, parent=None, position=0, title="Page", deleted=False):
    path, depth = tree_store.compute_child_path(parent)
    page = Page(
        id=new_id(),
        workspace_id=workspace.id,
        parent_id=parent.id if parent else None,
        title=title,
        path=path,
        depth=depth,
        position=position,
        deleted_at=datetime.utcnow() if deleted else None
    )
    db.add(page)
    db.commit()
    db.refresh(page)
    return page


def test_compute_child_path_root():
    assert tree_store.compute_child_path(None) == ([], 0)


def test_compute_child_path_nested(db, workspace):
    a = add_page(db, workspace, title="A")
    b = add_page(db, workspace, parent=a, title="B")
    path, depth = tree_store.compute_child_path(b)
    assert path == [a.id, b.id]
    assert depth == 2
    # le path du parent n'est pas modifié
    assert b.path == [a.id]


def test_get_page_not_found(db):
    with pytest.raises(PageNotFound):
        tree_store.get_page(db, "01ZZZZZZZZZZZZZZZZZZZZZZZZ")


def test_get_active_page_ignores_trashed(db, workspace):
    page = add_page(db, workspace, deleted=True)
    assert tree_store.get_page(db, page.id).id == page.id
    with pytest.raises(PageNotFound):
        tree_store.get_active_page(db, page.id)


def test_find_page_scoped_to_workspace(db, workspace):
    from app.services.workspace_service import create_default_workspace

    page = add_page(db, workspace)
    other = create_default_workspace(db, name="Autre")
    assert tree_store.find_page(db, page.id).id == page.id
    assert tree_store.find_page(db, page.id, workspace.id).id == page.id
    assert tree_store.find_page(db, page.id, other.id) is None
    assert tree_store.find_page(db, None) is None


def test_list_children_ordered_by_position(db, workspace):
    parent = add_page(db, workspace, title="Parent")
    add_page(db, workspace, parent=parent, position=5, title="c")
    add_page(db, workspace, parent=parent, position=1, title="a")
    add_page(db, workspace, parent=parent, position=3, title="b")
    add_page(db, workspace, parent=parent, position=2, title="corbeille", deleted=True)

    children = tree_store.list_children(db, parent.id, workspace.id)
    assert [p.title for p in children] == ["a", "b", "c"]


def test_list_children_root_level(db, workspace):
    root = add_page(db, workspace, title="racine")
    add_page(db, workspace, parent=root, title="enfant")
    assert [p.title for p in tree_store.list_children(db, None, workspace.id)] == ["racine"]


def test_next_position_counts_active_siblings(db, workspace):
    parent = add_page(db, workspace)
    assert tree_store.next_position(db, parent.id, workspace.id) == 0

    add_page(db, workspace, parent=parent, position=0)
    add_page(db, workspace, parent=parent, position=7)
    add_page(db, workspace, parent=parent, position=8, deleted=True)
    # nombre de frères actifs, pas max + 1
    assert tree_store.next_position(db, parent.id, workspace.id) == 2


def test_next_position_scoped_to_workspace(db, workspace):
    from app.services.workspace_service import create_default_workspace

    other = create_default_workspace(db, name="Autre")
    add_page(db, other)
    assert tree_store.next_position(db, None, workspace.id) == 0


def test_is_descendant_of(db, workspace):
    a = add_page(db, workspace, title="A")
    b = add_page(db, workspace, parent=a, title="B")
    c = add_page(db, workspace, parent=b, title="C")

    assert tree_store.is_descendant_of(a.id, c)
    assert tree_store.is_descendant_of(b.id, c)
    assert not tree_store.is_descendant_of(c.id, a)
    assert not tree_store.is_descendant_of(c.id, c)


def test_list_trashed_most_recent_first(db, workspace):
    old = add_page(db, workspace, title="vieux", deleted=True)
    recent = add_page(db, workspace, title="récent", deleted=True)
    add_page(db, workspace, title="actif")

    assert [p.id for p in tree_store.list_trashed(db, workspace.id)] == [recent.id, old.id]
