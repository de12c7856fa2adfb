"""Tests for SpatialNode and Octree insertion."""

import math

import pytest

from nbody_octree import (
    Body,
    BoundingVolume,
    InvalidBodyError,
    InvalidIntervalError,
    Interval,
    MaxDepthExceededError,
    Octree,
    OutOfBoundsError,
    OutOfBoundsWarning,
    Point,
    SpatialNode,
    ValidationError,
    random_bodies,
)

SPACE = BoundingVolume.cube(0.0, 1024.0)


class TestBody:
    """Tests for the Body and Point dataclasses."""

    def test_body_creation(self):
        """Test basic body creation."""
        body = Body(mass=1.5, location=Point(10.0, 20.0, 30.0))
        assert body.mass == 1.5
        assert body.location.x == 10.0
        assert body.location.y == 20.0
        assert body.location.z == 30.0

    def test_body_at(self):
        """Shorthand constructor defaults mass to 1."""
        body = Body.at(1, 2, 3)
        assert body.mass == 1.0
        assert body.location == Point(1.0, 2.0, 3.0)

    def test_mass_single_precision(self):
        """Mass is rounded to 32-bit float precision."""
        body = Body.at(0, 0, 0, mass=0.1)
        assert body.mass != 0.1
        assert math.isclose(body.mass, 0.1, rel_tol=1e-7)

    def test_body_is_immutable(self):
        """Bodies cannot be modified after creation."""
        body = Body.at(0, 0, 0)
        with pytest.raises(AttributeError):
            body.mass = 2.0  # type: ignore[misc]

    def test_point_from_sequence(self):
        """Points can be built from 3-element sequences."""
        assert Point.from_sequence([1, 2, 3]) == Point(1.0, 2.0, 3.0)
        with pytest.raises(ValueError, match="3 coordinates"):
            Point.from_sequence([1, 2])


class TestSpatialNode:
    """Tests for SpatialNode."""

    def test_node_creation(self):
        """New nodes are empty with 8 child slots."""
        node = SpatialNode(SPACE)
        assert node.bounding_volume == SPACE
        assert node.body is None
        assert node.children == [None] * 8
        assert node.is_empty()
        assert node.is_leaf()
        assert node.child_count() == 0

    def test_insert_into_empty_node(self):
        """First insert stores the body at the node itself."""
        node = SpatialNode(SPACE)
        body = Body.at(100, 100, 100)
        assert node.insert(body) == 0
        assert node.body is body
        assert node.is_leaf()
        assert not node.is_empty()

    def test_second_insert_creates_one_child(self):
        """An occupied node routes the newcomer into one lazily created child."""
        node = SpatialNode(SPACE)
        node.insert(Body.at(100, 100, 100))
        depth = node.insert(Body.at(900, 900, 900))

        assert depth == 1
        assert node.child_count() == 1
        assert [index for index, _ in node.iter_children()] == [7]
        assert node.children[7].bounding_volume == SPACE.octant(7)

    def test_child_volumes_nest(self):
        """Each child's volume is the matching octant of its parent."""
        node = SpatialNode(SPACE)
        for body in random_bodies(50, SPACE, seed=3):
            node.insert(body)

        stack = [node]
        while stack:
            current = stack.pop()
            for index, child in current.iter_children():
                assert child.bounding_volume == current.bounding_volume.octant(index)
                stack.append(child)


class TestOctreeInsertion:
    """Tests for Octree insertion with resident retention (default)."""

    def test_empty_tree(self):
        """Test empty tree state."""
        tree = Octree(SPACE)
        assert tree.body_count == 0
        assert tree.root.is_empty()
        assert tree.bounds == SPACE

    def test_single_body_insertion(self):
        """Root holds a lone body and has no children."""
        tree = Octree(SPACE)
        body = Body.at(25.0, 25.0, 25.0)
        assert tree.insert(body) == 0

        assert tree.body_count == 1
        assert tree.root.body is body
        assert tree.root.child_count() == 0

    def test_two_opposite_bodies(self):
        """Second body goes to octant 7 while the first stays at the root."""
        tree = Octree(SPACE)
        first = Body.at(100, 100, 100)
        second = Body.at(900, 900, 900)
        tree.insert(first)
        tree.insert(second)

        assert tree.root.body is first
        assert tree.root.child_count() == 1
        child = tree.root.children[7]
        assert child is not None
        assert child.body is second
        assert child.bounding_volume == BoundingVolume.cube(512.0, 1024.0)

    def test_resident_is_not_relocated(self):
        """The root keeps its body after gaining children."""
        tree = Octree(SPACE)
        first = Body.at(100, 100, 100)
        tree.insert(first)
        tree.insert(Body.at(200, 200, 200))
        tree.insert(Body.at(300, 300, 300))

        assert tree.root.body is first
        assert not tree.root.is_leaf()

    def test_same_octant_chain(self):
        """Bodies sharing an octant path stack up one level at a time."""
        tree = Octree(SPACE)
        a = Body.at(100, 100, 100)
        b = Body.at(200, 200, 200)
        c = Body.at(150, 150, 150)
        assert tree.insert(a) == 0
        assert tree.insert(b) == 1
        assert tree.insert(c) == 2

        child = tree.root.children[0]
        assert child.body is b
        # Within [0, 512]: 150 < 256 on every axis
        assert child.children[0].body is c

    def test_insertion_order_matters(self):
        """Swapping insertion order changes which body sits at the root."""
        a = Body.at(100, 100, 100)
        b = Body.at(200, 200, 200)

        ab = Octree(SPACE).extend([a, b])
        ba = Octree(SPACE).extend([b, a])

        assert ab.root.body is a
        assert ba.root.body is b
        assert ab.root.children[0].body is b
        assert ba.root.children[0].body is a

    def test_one_new_node_per_insert(self):
        """Each insertion after the first materializes exactly one node."""
        bodies = random_bodies(300, SPACE, seed=11)
        tree = Octree(SPACE).extend(bodies)

        assert tree.body_count == 300
        assert tree.node_count() == 300
        assert len(tree.bodies()) == 300

    def test_extend_returns_self(self):
        """extend() supports chaining."""
        tree = Octree(SPACE)
        assert tree.extend([Body.at(1, 1, 1)]) is tree

    def test_find(self):
        """find() follows the octant path to the holding node."""
        tree = Octree(SPACE)
        first = Body.at(100, 100, 100)
        second = Body.at(900, 900, 900)
        tree.extend([first, second])

        assert tree.find(first) == (0, tree.root)
        assert tree.find(second) == (1, tree.root.children[7])
        assert tree.find(Body.at(5, 5, 5)) is None


class TestDepthLimit:
    """Tests for the bounded-depth failure mode."""

    def test_two_identical_bodies_terminate(self):
        """Duplicate coordinates at the center settle without error."""
        tree = Octree(SPACE)
        first = Body.at(512, 512, 512)
        second = Body.at(512, 512, 512)
        assert tree.insert(first) == 0
        assert tree.insert(second) == 1
        assert tree.root.children[7].body is second

    def test_duplicates_hit_max_depth(self):
        """Each duplicate goes one level deeper until the limit is reached."""
        tree = Octree(SPACE, max_depth=4)
        for expected in range(5):
            assert tree.insert(Body.at(300, 300, 300)) == expected

        with pytest.raises(MaxDepthExceededError, match="max-depth-exceeded") as excinfo:
            tree.insert(Body.at(300, 300, 300))

        assert excinfo.value.max_depth == 4
        assert excinfo.value.depth == 5

    def test_failed_insert_leaves_tree_unchanged(self):
        """A rejected insertion does not add nodes or bodies."""
        tree = Octree(SPACE, max_depth=2)
        tree.extend([Body.at(7, 7, 7)] * 3)
        nodes_before = tree.node_count()

        with pytest.raises(MaxDepthExceededError):
            tree.insert(Body.at(7, 7, 7))

        assert tree.body_count == 3
        assert tree.node_count() == nodes_before

    def test_default_limit_is_64(self):
        """Default max depth is 64."""
        assert Octree(SPACE).max_depth == 64

    def test_many_duplicates_never_exhaust_stack(self):
        """Inserting far more duplicates than the limit raises cleanly."""
        tree = Octree(SPACE)
        with pytest.raises(MaxDepthExceededError):
            for _ in range(200):
                tree.insert(Body.at(512, 512, 512))
        assert tree.body_count == 65
        assert tree.depth() == 64


class TestRelocateResident:
    """Tests for the one-body-per-leaf insertion discipline."""

    def test_two_opposite_bodies(self):
        """Both bodies end up in leaves and the root is emptied."""
        tree = Octree(SPACE, relocate_resident=True)
        first = Body.at(100, 100, 100)
        second = Body.at(900, 900, 900)
        tree.insert(first)
        assert tree.insert(second) == 1

        assert tree.root.body is None
        assert tree.root.children[0].body is first
        assert tree.root.children[7].body is second

    def test_close_bodies_split_deep(self):
        """Bodies sharing an octant are pushed down until they separate."""
        tree = Octree(SPACE, relocate_resident=True)
        a = Body.at(100, 100, 100)
        b = Body.at(200, 200, 200)
        tree.insert(a)
        assert tree.insert(b) == 3

        assert tree.find(a)[0] == 3
        assert tree.find(b)[0] == 3
        assert tree.node_count() == 5

    def test_every_body_in_a_leaf(self):
        """No internal node holds a body."""
        bodies = random_bodies(400, SPACE, seed=5)
        tree = Octree(SPACE, relocate_resident=True).extend(bodies)

        assert len(tree.bodies()) == 400
        for _, node in tree.iter_nodes():
            if node.body is not None:
                assert node.is_leaf()

    def test_identical_bodies_raise_without_mutation(self):
        """Coincident bodies cannot be separated and the tree is untouched."""
        tree = Octree(SPACE, relocate_resident=True)
        first = Body.at(512, 512, 512)
        tree.insert(first)

        with pytest.raises(MaxDepthExceededError):
            tree.insert(Body.at(512, 512, 512))

        assert tree.root.body is first
        assert tree.root.is_leaf()
        assert tree.body_count == 1

    def test_relocate_mode_is_fixed(self):
        """The insertion discipline cannot change after creation."""
        tree = Octree(SPACE, relocate_resident=True)
        with pytest.raises(AttributeError):
            tree.relocate_resident = False  # type: ignore[misc]


class TestBoundsHandling:
    """Tests for bodies outside the root volume."""

    def test_permissive_warns_and_places(self):
        """Out-of-bounds bodies are placed by midpoint and warned about."""
        tree = Octree(SPACE)
        tree.insert(Body.at(10, 10, 10))
        outside = Body.at(2000, -50, 10)

        with pytest.warns(OutOfBoundsWarning, match="outside the root volume"):
            depth = tree.insert(outside)

        assert depth == 1
        assert tree.root.children[1].body is outside

    def test_strict_rejects(self):
        """strict_bounds raises and leaves the tree empty."""
        tree = Octree(SPACE, strict_bounds=True)
        with pytest.raises(OutOfBoundsError, match="out-of-bounds"):
            tree.insert(Body.at(-1, 0, 0))

        assert tree.body_count == 0
        assert tree.root.is_empty()

    def test_boundary_is_inside(self):
        """Bodies on the boundary faces are accepted in strict mode."""
        tree = Octree(SPACE, strict_bounds=True)
        tree.insert(Body.at(0, 0, 0))
        tree.insert(Body.at(1024, 1024, 1024))
        assert tree.body_count == 2

    def test_strict_bounds_setter(self):
        """strict_bounds can be toggled."""
        tree = Octree(SPACE)
        tree.strict_bounds = True
        assert tree.strict_bounds is True


class TestOctreeValidation:
    """Tests for input checks on the tree."""

    def test_reversed_bounds_raise(self):
        """Reversed axis is rejected."""
        bounds = BoundingVolume(Interval(10.0, 0.0), Interval(0.0, 1.0), Interval(0.0, 1.0))
        with pytest.raises(InvalidIntervalError, match="x start must be <= end"):
            Octree(bounds)

    def test_nan_body_rejected(self):
        """Bodies with NaN coordinates are rejected."""
        tree = Octree(SPACE)
        with pytest.raises(InvalidBodyError, match="location must be finite"):
            tree.insert(Body.at(float("nan"), 0, 0))
        assert tree.body_count == 0

    def test_max_depth_validation(self):
        """max_depth must be a positive integer."""
        with pytest.raises(ValidationError):
            Octree(SPACE, max_depth=0)

        tree = Octree(SPACE)
        tree.max_depth = 8
        assert tree.max_depth == 8
        with pytest.raises(ValidationError):
            tree.max_depth = -3


class TestTraversal:
    """Tests for read-only traversal."""

    def test_iter_nodes_preorder(self):
        """Nodes come out in pre-order, children in octant order."""
        tree = Octree(SPACE)
        tree.extend(
            [
                Body.at(100, 100, 100),  # root
                Body.at(900, 900, 900),  # octant 7
                Body.at(900, 100, 100),  # octant 1
                Body.at(200, 200, 200),  # octant 0
                Body.at(950, 950, 950),  # octant 7 -> 7
            ]
        )

        order = [(depth, node.body.location.x) for depth, node in tree.iter_nodes()]
        assert order == [
            (0, 100.0),
            (1, 200.0),
            (1, 900.0),
            (1, 900.0),
            (2, 950.0),
        ]
        assert tree.depth() == 2
        assert tree.node_count() == 5

    def test_empty_tree_traversal(self):
        """An empty tree has just the root."""
        tree = Octree(SPACE)
        assert tree.node_count() == 1
        assert tree.depth() == 0
        assert tree.bodies() == []


class TestOctreeFromBodies:
    """Tests for building an Octree from bodies alone."""

    def test_from_bodies_empty(self):
        """Test building tree from empty body list."""
        tree = Octree.from_bodies([])
        assert tree.body_count == 0

    def test_from_bodies_basic(self):
        """Root volume encloses all bodies."""
        bodies = [Body.at(10, 20, 30), Body.at(-5, 40, 0), Body.at(50, 60, 70)]
        tree = Octree.from_bodies(bodies, padding=2.0)

        assert tree.body_count == 3
        assert tree.bounds.x == Interval(-7.0, 52.0)
        for body in bodies:
            assert tree.bounds.contains(body.location)

    def test_from_bodies_config(self):
        """Configuration keywords are forwarded."""
        tree = Octree.from_bodies([Body.at(0, 0, 0)], relocate_resident=True, max_depth=10)
        assert tree.relocate_resident is True
        assert tree.max_depth == 10
