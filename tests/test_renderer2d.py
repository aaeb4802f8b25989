import math
from dataclasses import dataclass

import numpy as np
import pytest

from xbengine.render_api import RecordingRendererAPI
from xbengine.renderer2d import Renderer2D, Statistics
from xbengine.texture import SubTexture2D, Texture2D

RED = (1.0, 0.0, 0.0, 1.0)


@dataclass
class Sprite:
    color: tuple = (1.0, 1.0, 1.0, 1.0)
    texture: object = None


@pytest.fixture
def setup():
    api = RecordingRendererAPI()
    renderer = Renderer2D(api)
    renderer.begin_scene(np.identity(4))
    return api, renderer


def test_single_quad_produces_one_indexed_call(setup):
    api, renderer = setup
    renderer.draw_quad((0.0, 0.0), (1.0, 1.0), RED)
    renderer.end_scene()
    assert len(api.draw_calls) == 1
    call = api.draw_calls[0]
    assert call.kind == "indexed"
    assert call.batch == "quad"
    assert call.count == 6
    assert [v.position for v in call.vertices] == [
        pytest.approx((-0.5, -0.5, 0.0)),
        pytest.approx((0.5, -0.5, 0.0)),
        pytest.approx((0.5, 0.5, 0.0)),
        pytest.approx((-0.5, 0.5, 0.0)),
    ]
    assert [v.tex_coord for v in call.vertices] == [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]
    assert all(v.color == RED and v.tex_index == 0.0 for v in call.vertices)


def test_stats_track_quads_and_draw_calls(setup):
    api, renderer = setup
    for _ in range(3):
        renderer.draw_quad((0.0, 0.0, 0.0), (1.0, 1.0), RED)
    renderer.end_scene()
    assert renderer.stats.quad_count == 3
    assert renderer.stats.draw_calls == 1
    assert renderer.stats.total_vertex_count == 4 * renderer.stats.quad_count
    assert renderer.stats.total_index_count == 6 * renderer.stats.quad_count
    renderer.reset_stats()
    assert renderer.stats == Statistics()


def test_empty_scene_submits_nothing(setup):
    api, renderer = setup
    renderer.end_scene()
    assert api.draw_calls == []


def test_begin_scene_discards_pending_batch(setup):
    api, renderer = setup
    renderer.draw_quad((0.0, 0.0), (1.0, 1.0), RED)
    renderer.begin_scene(np.identity(4))
    renderer.end_scene()
    assert api.draw_calls == []


def test_begin_scene_sets_view_projection_uniform():
    renderer = Renderer2D()
    vp = np.diag([2.0, 3.0, 4.0, 1.0])
    renderer.begin_scene(vp)
    assert np.allclose(renderer.quad_shader.uniforms["u_ViewProjection"], vp)
    assert np.allclose(renderer.line_shader.uniforms["u_ViewProjection"], vp)


def test_begin_scene_rejects_bad_matrix():
    with pytest.raises(ValueError):
        Renderer2D().begin_scene(np.identity(3))


def test_same_texture_shares_a_slot(setup):
    api, renderer = setup
    tex = Texture2D(4, 4)
    renderer.draw_quad((0.0, 0.0), (1.0, 1.0), texture=tex)
    renderer.draw_quad((1.0, 0.0), (1.0, 1.0), texture=tex)
    renderer.end_scene()
    assert {v.tex_index for v in api.draw_calls[0].vertices} == {1.0}
    assert renderer.texture_slots == (renderer.white_texture, tex)
    assert tex.bound_slot == 1
    assert renderer.white_texture.bound_slot == 0


def test_distinct_textures_get_distinct_slots(setup):
    api, renderer = setup
    a, b = Texture2D(2, 2), Texture2D(2, 2)
    renderer.draw_quad((0.0, 0.0), (1.0, 1.0), texture=a, tiling_factor=3.0)
    renderer.draw_quad((0.0, 0.0), (1.0, 1.0), texture=b)
    renderer.end_scene()
    verts = api.draw_calls[0].vertices
    assert [v.tex_index for v in verts] == [1.0] * 4 + [2.0] * 4
    assert verts[0].tiling_factor == 3.0


def test_texture_slot_overflow_starts_new_batch(setup):
    api, renderer = setup
    textures = [Texture2D(1, 1) for _ in range(Renderer2D.MAX_TEXTURE_SLOTS)]
    for tex in textures:
        renderer.draw_quad((0.0, 0.0), (1.0, 1.0), texture=tex)
    renderer.end_scene()
    assert len(api.draw_calls) == 2
    assert len(api.draw_calls[1].vertices) == 4
    assert api.draw_calls[1].vertices[0].tex_index == 1.0


def test_quad_batch_overflow_flushes(setup):
    api, renderer = setup
    identity = np.identity(4)
    for _ in range(Renderer2D.MAX_QUADS + 1):
        renderer.draw_quad_transform(identity, RED)
    renderer.end_scene()
    assert [c.count for c in api.draw_calls] == [Renderer2D.MAX_INDICES, 6]
    assert renderer.stats.quad_count == Renderer2D.MAX_QUADS + 1


def test_quad_transform_carries_entity_id(setup):
    api, renderer = setup
    renderer.draw_quad_transform(np.identity(4), RED, entity_id=7)
    renderer.end_scene()
    assert {v.entity_id for v in api.draw_calls[0].vertices} == {7}


def test_sub_texture_quad_uses_region_coords(setup):
    api, renderer = setup
    atlas = Texture2D(64, 64)
    sub = SubTexture2D.create_from_coords(atlas, (1, 1), (16, 16))
    renderer.draw_sub_texture_quad((0.0, 0.0), (1.0, 1.0), sub)
    renderer.end_scene()
    verts = api.draw_calls[0].vertices
    assert [v.tex_coord for v in verts] == list(sub.tex_coords)
    assert verts[0].tex_index == 1.0


def test_rotated_quad_preserves_distances(setup):
    api, renderer = setup
    renderer.draw_quad((0.0, 0.0), (2.0, 1.0), RED)
    renderer.draw_rotated_quad((0.0, 0.0), (2.0, 1.0), 0.7, RED)
    renderer.end_scene()
    verts = api.draw_calls[0].vertices
    plain = [np.linalg.norm(v.position) for v in verts[:4]]
    rotated = [np.linalg.norm(v.position) for v in verts[4:]]
    assert rotated == pytest.approx(plain)
    assert verts[4].position != pytest.approx(verts[0].position)


def test_textured_rotation_is_in_degrees(setup):
    api, renderer = setup
    tex = Texture2D(1, 1)
    renderer.draw_rotated_quad((1.0, 2.0), (2.0, 1.0), math.pi / 2, RED)
    renderer.draw_rotated_quad((1.0, 2.0), (2.0, 1.0), 90.0, texture=tex)
    renderer.end_scene()
    verts = api.draw_calls[0].vertices
    for a, b in zip(verts[:4], verts[4:]):
        assert b.position == pytest.approx(a.position)


def test_circle_vertices(setup):
    api, renderer = setup
    renderer.draw_circle(np.identity(4), RED, entity_id=3)
    renderer.end_scene()
    call = api.draw_calls[0]
    assert call.batch == "circle"
    assert call.count == 6
    assert call.vertices[0].local_position == pytest.approx((-1.0, -1.0, 0.0))
    assert call.vertices[0].thickness == 1.0
    assert call.vertices[0].fade == 0.005
    assert call.vertices[0].entity_id == 3
    assert renderer.stats.quad_count == 1


def test_line_call_uses_line_width(setup):
    api, renderer = setup
    renderer.draw_line((0.0, 0.0, 0.0), (1.0, 1.0, 0.0), RED)
    renderer.end_scene()
    call = api.draw_calls[0]
    assert call.kind == "lines"
    assert call.count == 2
    assert call.line_width == 2.0
    assert renderer.stats.quad_count == 0


def test_rect_and_rect_transform_agree(setup):
    api, renderer = setup
    renderer.draw_rect((0.0, 0.0, 0.0), (1.0, 1.0), RED)
    renderer.draw_rect_transform(np.identity(4), RED)
    renderer.end_scene()
    verts = api.draw_calls[0].vertices
    assert api.draw_calls[0].count == 16
    for a, b in zip(verts[:8], verts[8:]):
        assert b.position == pytest.approx(a.position)
    assert verts[1].position == verts[2].position
    assert verts[7].position == verts[0].position


def test_sprite_with_and_without_texture(setup):
    api, renderer = setup
    tex = Texture2D(1, 1)
    renderer.draw_sprite(np.identity(4), Sprite(RED), entity_id=4)
    renderer.draw_sprite(np.identity(4), Sprite(RED, tex), entity_id=5)
    renderer.end_scene()
    verts = api.draw_calls[0].vertices
    assert verts[0].tex_index == 0.0 and verts[0].entity_id == 4
    assert verts[4].tex_index == 1.0 and verts[4].entity_id == 5
    assert verts[4].color == RED


def test_all_batches_flush_together(setup):
    api, renderer = setup
    renderer.draw_quad((0.0, 0.0), (1.0, 1.0), RED)
    renderer.draw_circle(np.identity(4), RED)
    renderer.draw_line((0.0, 0.0), (1.0, 0.0), RED)
    renderer.end_scene()
    assert [c.batch for c in api.draw_calls] == ["quad", "circle", "line"]
    assert renderer.stats.draw_calls == 3


def test_bad_colour_rejected(setup):
    _, renderer = setup
    with pytest.raises(ValueError):
        renderer.draw_quad((0.0, 0.0), (1.0, 1.0), (1.0, 0.0, 0.0))