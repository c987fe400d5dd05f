"""Tests for the generating-provider registry and its builder."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from sabores.renderers import ProviderRegistry, ProviderRegistryBuilder
from sabores.renderers.providers import SimpleInlineTagProvider, SimpleTagProvider, SkipProvider
from sabores.tokens import ElementKind, ElementType


class TestProviderRegistry:
    def test_lookup(self) -> None:
        provider = SimpleTagProvider("p")
        registry = ProviderRegistry({ElementType.PARAGRAPH: provider})
        assert registry.lookup(ElementType.PARAGRAPH) is provider
        assert registry.lookup(ElementType.EMPH) is None

    def test_contains_and_len(self) -> None:
        registry = ProviderRegistry({ElementType.PARAGRAPH: SimpleTagProvider("p")})
        assert ElementType.PARAGRAPH in registry
        assert ElementType.EMPH not in registry
        assert len(registry) == 1
        assert registry.kinds == frozenset({ElementType.PARAGRAPH})

    def test_source_mapping_copied(self) -> None:
        providers = {ElementType.PARAGRAPH: SimpleTagProvider("p")}
        registry = ProviderRegistry(providers)
        providers[ElementType.EMPH] = SkipProvider()
        assert ElementType.EMPH not in registry

    def test_merged_override_wins(self) -> None:
        base = ProviderRegistry({
            ElementType.PARAGRAPH: SimpleTagProvider("p"),
            ElementType.EMPH: SimpleInlineTagProvider("em", 1, -1),
        })
        override = SimpleInlineTagProvider("i", 1, -1)
        merged = base.merged({ElementType.EMPH: override})
        assert merged.lookup(ElementType.EMPH) is override
        assert merged.lookup(ElementType.PARAGRAPH) is base.lookup(ElementType.PARAGRAPH)
        # The base is untouched
        assert base.lookup(ElementType.EMPH) is not override

    def test_merged_accepts_registry(self) -> None:
        base = ProviderRegistry({ElementType.PARAGRAPH: SimpleTagProvider("p")})
        skip = SkipProvider()
        merged = base.merged(ProviderRegistry({ElementType.PARAGRAPH: skip}))
        assert merged.lookup(ElementType.PARAGRAPH) is skip


class TestProviderRegistryBuilder:
    def test_build(self) -> None:
        registry = (
            ProviderRegistryBuilder()
            .register(ElementType.EMPH, SimpleInlineTagProvider("em", 1, -1))
            .register(ElementType.STRONG, SimpleInlineTagProvider("strong", 2, -2))
            .build()
        )
        assert len(registry) == 2

    def test_last_registration_wins(self) -> None:
        skip = SkipProvider()
        registry = (
            ProviderRegistryBuilder()
            .register(ElementType.EMPH, SimpleInlineTagProvider("em", 1, -1))
            .register(ElementType.EMPH, skip)
            .build()
        )
        assert registry.lookup(ElementType.EMPH) is skip

    def test_rejects_non_provider(self) -> None:
        with pytest.raises(TypeError, match="process_node"):
            ProviderRegistryBuilder().register(ElementType.EMPH, object())  # type: ignore[arg-type]

    def test_seeded_from_base(self) -> None:
        base = ProviderRegistry({ElementType.PARAGRAPH: SimpleTagProvider("p")})
        builder = ProviderRegistryBuilder(base)
        builder.register_all({ElementType.EMPH: SkipProvider()})
        assert len(builder) == 2
        assert builder.build().kinds == frozenset({ElementType.PARAGRAPH, ElementType.EMPH})


# A small universe of kinds and providers for merge properties
KINDS = [ElementKind(f"K{i}") for i in range(8)]
PROVIDERS = [SimpleTagProvider(f"t{i}") for i in range(4)]
mappings = st.dictionaries(st.sampled_from(KINDS), st.sampled_from(PROVIDERS), max_size=8)


class TestMergeProperties:
    @given(mappings, mappings)
    @settings(max_examples=100)
    def test_lookup_after_merge(self, base: dict, overrides: dict) -> None:
        merged = ProviderRegistry(base).merged(overrides)
        for kind in KINDS:
            if kind in overrides:
                assert merged.lookup(kind) is overrides[kind]
            else:
                assert merged.lookup(kind) is base.get(kind)

    @given(mappings)
    @settings(max_examples=50)
    def test_merge_with_empty_is_identity(self, base: dict) -> None:
        registry = ProviderRegistry(base)
        merged = registry.merged({})
        assert dict(merged.items()) == dict(registry.items())

    @given(mappings, mappings, mappings)
    @settings(max_examples=50)
    def test_merge_is_associative(self, a: dict, b: dict, c: dict) -> None:
        left = ProviderRegistry(a).merged(b).merged(c)
        right = ProviderRegistry(a).merged(ProviderRegistry(b).merged(c))
        assert dict(left.items()) == dict(right.items())
