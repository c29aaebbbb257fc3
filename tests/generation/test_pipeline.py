"""Tests for the layout engine and its factory.

Covers:
- CityLayoutEngine: determinism, ordering, foundations, freezing, logging
- Factory: preset layer stacks and strategy lookup
"""

from __future__ import annotations

import logging
from typing import ClassVar

import numpy as np
import pytest

from citylayout.generation import (
    PRIMITIVE_VARIANT,
    AssetCatalog,
    AssetCategory,
    BSPZoningLayer,
    CityConfig,
    CityLayoutEngine,
    ElevationLayer,
    GenerationContext,
    GenerationLayer,
    InvalidConfigError,
    LatticeZoningLayer,
    PlacementLayer,
    RoadTopologyLayer,
    ZoneKind,
    ZoningStrategy,
    create_engine,
    create_layers,
)

# =============================================================================
# Determinism
# =============================================================================


class TestDeterminism:
    """Identical config and seed give identical plans."""

    @pytest.mark.parametrize("strategy", ["lattice", "bsp"])
    def test_same_seed_same_plan(self, strategy: str, catalog: AssetCatalog) -> None:
        """Two independent runs produce the same commands in the same order."""
        a = create_engine(strategy, catalog, width=24, height=24, seed=99).generate()
        b = create_engine(strategy, catalog, width=24, height=24, seed=99).generate()

        assert a == b
        assert a.to_rows() == b.to_rows()
        assert a.to_json() == b.to_json()

    def test_engine_is_reusable(self, catalog: AssetCatalog) -> None:
        """Generating twice with one engine gives the same plan."""
        engine = create_engine("lattice", catalog, width=16, height=16, seed=4)
        assert engine.generate() == engine.generate()

    def test_different_seeds_differ(self, catalog: AssetCatalog) -> None:
        """Changing the seed changes the plan."""
        a = create_engine("lattice", catalog, width=24, height=24, seed=1).generate()
        b = create_engine("lattice", catalog, width=24, height=24, seed=2).generate()
        assert a != b


# =============================================================================
# Plan assembly
# =============================================================================


class TestAssembly:
    """Tests for command order and the elevation commands."""

    def test_lattice_starts_with_base_slab(self) -> None:
        """An elevation-aware run emits one slab spanning the whole city."""
        engine = create_engine(
            "lattice", width=10, height=6, cell_size=4.0, elevation_step=2.0
        )

        plan = engine.generate()

        slab = plan[0]
        assert slab.category is AssetCategory.FOUNDATION
        assert slab.variant == PRIMITIVE_VARIANT
        assert slab.label == "CityBaseFoundation"
        assert slab.position == (18.0, -1.0, 10.0)
        assert slab.scale == (40.0, 2.0, 24.0)
        assert sum(1 for c in plan if c.variant == PRIMITIVE_VARIANT) == 1

    def test_bsp_has_no_foundations(self) -> None:
        """Strategies without elevation emit no slab and no columns."""
        plan = create_engine("bsp", width=20, height=20, seed=3).generate()
        assert plan.count_category(AssetCategory.FOUNDATION) == 0

    def test_foundation_columns_match_elevation(self) -> None:
        """Each raised cell gets one foundation per level below it."""
        engine = create_engine(
            "lattice", width=30, height=30, seed=8, hill_frequency=1.0, max_elevation=2
        )

        ctx, plan = engine.build()

        raised = int(ctx.grid.elevation.sum())
        assert raised > 0
        assert plan.count_category(AssetCategory.FOUNDATION) == 1 + raised

        columns = [
            c
            for c in plan.by_category(AssetCategory.FOUNDATION)
            if c.label == "Foundation"
        ]
        heights = sorted({c.position[1] for c in columns})
        assert heights == [0.0, 5.0]

    def test_every_road_cell_resolved(self) -> None:
        """With every category stocked, each road cell yields one road command."""
        engine = create_engine("lattice", width=20, height=20, seed=12)

        ctx, plan = engine.build()

        road_commands = sum(1 for c in plan if c.category.is_road)
        assert road_commands == ctx.grid.count(ZoneKind.ROAD)

    def test_commands_follow_x_major_order(self) -> None:
        """After the slab, cell commands run x-major: for x, then for y."""
        config = CityConfig(width=12, height=12, seed=6, cell_size=1.0)
        plan = CityLayoutEngine(config, AssetCatalog.placeholder()).generate()

        cells = [
            (round(c.position[0]), round(c.position[2]))
            for c in plan[1:]
            if c.category.is_road or c.label == "Foundation"
        ]
        assert cells == sorted(cells)

    def test_progress_reports_each_column(self, catalog: AssetCatalog) -> None:
        """The progress callback fires once per grid column."""
        calls: list[tuple[int, int]] = []
        engine = create_engine("bsp", catalog, width=14, height=9)

        engine.generate(progress=lambda done, total: calls.append((done, total)))

        assert calls == [(x, 14) for x in range(1, 15)]

    def test_plan_round_trips_through_json(self, catalog: AssetCatalog) -> None:
        """to_json/from_json reproduce an equal plan."""
        plan = create_engine("lattice", catalog, width=16, height=16).generate()

        restored = type(plan).from_json(plan.to_json())

        assert restored == plan
        assert restored.to_rows() == plan.to_rows()


# =============================================================================
# Errors and degraded runs
# =============================================================================


class TestErrors:
    """Tests for config errors and missing assets."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"width": 0},
            {"height": -1},
            {"cell_size": 0.0},
            {"min_block_size": 6, "max_block_size": 3},
            {"max_elevation": 40_000, "hill_frequency": 1.0},
        ],
    )
    def test_invalid_config_raises_before_generation(self, overrides: dict) -> None:
        """InvalidConfigError surfaces from generate() and no layer runs."""
        applied: list[str] = []

        class Spy(GenerationLayer):
            def apply(self, ctx: GenerationContext) -> None:
                applied.append("spy")

        config = CityConfig(**overrides)
        engine = CityLayoutEngine(config, AssetCatalog.placeholder(), layers=[Spy()])

        with pytest.raises(InvalidConfigError):
            engine.generate()
        assert applied == []

    def test_empty_commercial_list(self) -> None:
        """No commercial assets: zero commercial buildings, run completes."""
        entries = dict(AssetCatalog.placeholder().entries)
        entries[AssetCategory.BUILDING_COMMERCIAL] = []
        engine = create_engine(
            "lattice",
            AssetCatalog(entries=entries),
            width=30,
            height=30,
            seed=2,
            density=1.0,
        )

        ctx, plan = engine.build()

        assert plan.count_category(AssetCategory.BUILDING_COMMERCIAL) == 0
        assert len(plan) > 0
        commercial_cells = ctx.grid.count(ZoneKind.COMMERCIAL)
        assert ctx.skipped[AssetCategory.BUILDING_COMMERCIAL] == commercial_cells

    def test_skipped_categories_are_logged(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """One warning per category that had placements skipped."""
        engine = create_engine("bsp", AssetCatalog(), width=20, height=20, seed=1)

        with caplog.at_level(logging.WARNING, logger="citylayout.generation.pipeline"):
            plan = engine.generate()

        assert len(plan) == 0
        messages = [r.getMessage() for r in caplog.records]
        assert any("road_" in m for m in messages)
        assert len(messages) == len(set(messages))

    def test_empty_catalog_lattice_still_emits_slab(self) -> None:
        """The slab needs no asset, so it survives an empty catalog."""
        plan = create_engine("lattice", AssetCatalog(), width=8, height=8).generate()
        assert len(plan) == 1
        assert plan[0].variant == PRIMITIVE_VARIANT


# =============================================================================
# Layers and freezing
# =============================================================================


class RecordingLayer(GenerationLayer):
    """Test layer that records whether the grid was frozen when applied."""

    seen: ClassVar[list[tuple[str, bool]]] = []

    def __init__(self, name: str, writes_grid: bool) -> None:
        self.name = name
        self.writes_grid = writes_grid

    def apply(self, ctx: GenerationContext) -> None:
        RecordingLayer.seen.append((self.name, ctx.grid.frozen))


class TestLayerOrchestration:
    """Tests for layer order and grid freezing."""

    def setup_method(self) -> None:
        RecordingLayer.seen = []

    def test_layers_run_in_order_and_grid_freezes(self) -> None:
        """Terrain layers see a writable grid; later layers a frozen one."""
        layers: list[GenerationLayer] = [
            RecordingLayer("zoning", writes_grid=True),
            RecordingLayer("hills", writes_grid=True),
            RecordingLayer("roads", writes_grid=False),
            RecordingLayer("props", writes_grid=False),
        ]
        engine = CityLayoutEngine(CityConfig(width=4, height=4), AssetCatalog(), layers)

        ctx = engine.run_layers()

        assert RecordingLayer.seen == [
            ("zoning", False),
            ("hills", False),
            ("roads", True),
            ("props", True),
        ]
        assert ctx.grid.frozen

    def test_grid_is_frozen_after_build(self, catalog: AssetCatalog) -> None:
        """The finished grid rejects writes."""
        ctx, _ = create_engine("lattice", catalog, width=8, height=8).build()

        with pytest.raises(ValueError):
            ctx.grid.zones[0, 0] = ZoneKind.PARK

    def test_default_layers_follow_strategy(self) -> None:
        """Without explicit layers the engine builds the standard stack."""
        engine = CityLayoutEngine(
            CityConfig.for_strategy(ZoningStrategy.BSP), AssetCatalog()
        )
        assert isinstance(engine.layers[0], BSPZoningLayer)


class TestFactory:
    """Tests for the factory helpers."""

    def test_create_layers_order(self) -> None:
        """Zoning, elevation, roads, placement."""
        layers = create_layers(CityConfig())

        assert [type(layer) for layer in layers] == [
            LatticeZoningLayer,
            ElevationLayer,
            RoadTopologyLayer,
            PlacementLayer,
        ]

    def test_create_engine_accepts_name_or_enum(self) -> None:
        """Strategy names and enum members are interchangeable."""
        by_name = create_engine("bsp", width=10, height=10)
        by_enum = create_engine(ZoningStrategy.BSP, width=10, height=10)
        assert by_name.config == by_enum.config

    def test_create_engine_defaults_to_placeholder_catalog(self) -> None:
        """Without assets the engine uses placeholder handles."""
        engine = create_engine("lattice", width=6, height=6)
        assert engine.assets.assets(AssetCategory.TREE)

    def test_unknown_strategy(self) -> None:
        """Unknown strategy names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown zoning strategy"):
            create_engine("voronoi")

    def test_bsp_zones_include_only_known_kinds(self) -> None:
        """A full BSP run zones every cell with a known kind."""
        ctx, _ = create_engine("bsp", seed=10).build()
        assert np.isin(ctx.grid.zones, [int(z) for z in ZoneKind]).all()
