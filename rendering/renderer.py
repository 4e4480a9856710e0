from __future__ import annotations

import ctypes
import logging
import threading
from collections import deque
from pathlib import Path
from typing import Deque, Optional, Tuple

import glfw
import numpy as np
from OpenGL import GL

from galaxy.cloud import PointCloud
from galaxy.controller import CloudController
from rendering.sprite import load_sprite
from rendering.transforms import look_at, orbit_eye, perspective, rotation_y
from ui.hud import HUDOverlay
from ui.panel import ParameterPanel
from utils.clock import FrameClock
from utils.config import HUDConfig, RenderConfig, project_path

logger = logging.getLogger(__name__)


class GalaxyRenderer:
    """OpenGL viewer that draws the controller's current cloud as point sprites."""

    def __init__(self, config: RenderConfig, hud_config: HUDConfig, controller: CloudController) -> None:
        self._config = config
        self._controller = controller
        self._panel = ParameterPanel(controller)
        self._hud = HUDOverlay(hud_config, config.window_width, config.window_height)
        self._hud_interval = hud_config.refresh_interval
        self._thread = threading.Thread(target=self._render_loop, daemon=True)
        self._stop_event = threading.Event()
        self._window: Optional[glfw._GLFWwindow] = None
        self._point_program = None
        self._quad_program = None
        self._cloud_vao: Optional[int] = None
        self._cloud_vbos: Tuple[int, ...] = ()
        self._cloud_count = 0
        self._uploaded_cloud: Optional[PointCloud] = None
        self._uploaded_version = 0
        self._sprite_texture: Optional[int] = None
        self._hud_texture: Optional[int] = None
        self._quad_vao: Optional[int] = None
        self._hud_visible = True
        self._hud_dirty = True
        self._hud_drawn_at = 0.0
        self._zoom = 1.0
        self._released: Deque[PointCloud] = deque()
        self._pixel_ratio = 1.0
        controller.add_release_callback(self._on_cloud_released)

    def start(self) -> None:
        self._stop_event.clear()
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread.is_alive():
            self._thread.join()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the window closes. Returns False on timeout."""
        return self._stop_event.wait(timeout)

    def _render_loop(self) -> None:
        if not glfw.init():
            self._stop_event.set()
            raise RuntimeError("Failed to initialize GLFW. Ensure a valid OpenGL context is available.")
        glfw.window_hint(glfw.SAMPLES, 4)
        glfw.window_hint(glfw.CONTEXT_VERSION_MAJOR, 3)
        glfw.window_hint(glfw.CONTEXT_VERSION_MINOR, 3)
        glfw.window_hint(glfw.OPENGL_PROFILE, glfw.OPENGL_CORE_PROFILE)
        glfw.window_hint(glfw.OPENGL_FORWARD_COMPAT, glfw.TRUE)
        glfw.window_hint(glfw.RESIZABLE, glfw.FALSE)
        self._window = glfw.create_window(
            self._config.window_width,
            self._config.window_height,
            self._config.title,
            None,
            None,
        )
        if not self._window:
            glfw.terminate()
            self._stop_event.set()
            raise RuntimeError("Unable to create GLFW window.")
        glfw.make_context_current(self._window)
        glfw.set_key_callback(self._window, self._on_key)
        glfw.set_scroll_callback(self._window, self._on_scroll)
        glfw.swap_interval(1)
        fb_width, _ = glfw.get_framebuffer_size(self._window)
        self._pixel_ratio = min(fb_width / self._config.window_width, self._config.max_pixel_ratio)
        logger.info(
            "Window %dx%d, pixel ratio %.1f",
            self._config.window_width,
            self._config.window_height,
            self._pixel_ratio,
        )

        try:
            self._compile_shaders()
            self._setup_quad()
            self._setup_sprite()
            self._cloud_vao = GL.glGenVertexArrays(1)
            GL.glEnable(GL.GL_PROGRAM_POINT_SIZE)
            clock = FrameClock()

            while not glfw.window_should_close(self._window) and not self._stop_event.is_set():
                cloud, params, version = self._controller.snapshot()
                self._delete_released()
                if version != self._uploaded_version:
                    self._upload_cloud(cloud)
                    self._uploaded_version = version
                    self._hud_dirty = True
                elapsed = clock.tick()
                rotation = elapsed * params.rotation_speed if params is not None else 0.0
                self._draw_cloud(rotation)
                if self._hud_visible:
                    self._draw_hud(clock, elapsed)
                glfw.swap_buffers(self._window)
                glfw.poll_events()
        finally:
            glfw.terminate()
            self._stop_event.set()

    def _compile_shaders(self) -> None:
        self._point_program = self._build_program(
            project_path("shaders", "galaxy.vert"),
            project_path("shaders", "galaxy.frag"),
        )
        self._quad_program = self._build_program_from_source(_QUAD_VERT, _QUAD_FRAG)

    def _setup_quad(self) -> None:
        quad_vertices = np.array(
            [
                -1.0, -1.0, 0.0, 0.0,
                1.0, -1.0, 1.0, 0.0,
                -1.0, 1.0, 0.0, 1.0,
                1.0, 1.0, 1.0, 1.0,
            ],
            dtype=np.float32,
        )
        self._quad_vao = GL.glGenVertexArrays(1)
        quad_vbo = GL.glGenBuffers(1)
        GL.glBindVertexArray(self._quad_vao)
        GL.glBindBuffer(GL.GL_ARRAY_BUFFER, quad_vbo)
        GL.glBufferData(GL.GL_ARRAY_BUFFER, quad_vertices.nbytes, quad_vertices, GL.GL_STATIC_DRAW)
        stride = 4 * quad_vertices.itemsize
        GL.glEnableVertexAttribArray(0)
        GL.glVertexAttribPointer(0, 2, GL.GL_FLOAT, GL.GL_FALSE, stride, ctypes.c_void_p(0))
        GL.glEnableVertexAttribArray(1)
        GL.glVertexAttribPointer(1, 2, GL.GL_FLOAT, GL.GL_FALSE, stride, ctypes.c_void_p(8))
        self._hud_texture = self._create_texture()
        GL.glUseProgram(self._quad_program)
        GL.glUniform1i(GL.glGetUniformLocation(self._quad_program, "uFrame"), 0)

    def _setup_sprite(self) -> None:
        sprite = load_sprite(self._config.sprite_path)
        GL.glUseProgram(self._point_program)
        GL.glUniform1i(GL.glGetUniformLocation(self._point_program, "uSprite"), 1)
        GL.glUniform1i(GL.glGetUniformLocation(self._point_program, "uUseSprite"), int(sprite is not None))
        if sprite is None:
            return
        self._sprite_texture = self._create_texture()
        self._upload_rgba(self._sprite_texture, sprite)

    def _create_texture(self) -> int:
        texture = GL.glGenTextures(1)
        GL.glBindTexture(GL.GL_TEXTURE_2D, texture)
        GL.glTexParameteri(GL.GL_TEXTURE_2D, GL.GL_TEXTURE_MIN_FILTER, GL.GL_LINEAR)
        GL.glTexParameteri(GL.GL_TEXTURE_2D, GL.GL_TEXTURE_MAG_FILTER, GL.GL_LINEAR)
        GL.glTexParameteri(GL.GL_TEXTURE_2D, GL.GL_TEXTURE_WRAP_S, GL.GL_CLAMP_TO_EDGE)
        GL.glTexParameteri(GL.GL_TEXTURE_2D, GL.GL_TEXTURE_WRAP_T, GL.GL_CLAMP_TO_EDGE)
        GL.glPixelStorei(GL.GL_UNPACK_ALIGNMENT, 1)
        return texture

    def _upload_rgba(self, texture: int, image: np.ndarray) -> None:
        h, w, _ = image.shape
        GL.glBindTexture(GL.GL_TEXTURE_2D, texture)
        GL.glTexImage2D(GL.GL_TEXTURE_2D, 0, GL.GL_RGBA, w, h, 0, GL.GL_RGBA, GL.GL_UNSIGNED_BYTE, image)

    def _upload_cloud(self, cloud: Optional[PointCloud]) -> None:
        """Copy the new cloud into fresh buffers, dropping whatever was on the GPU."""
        self._free_buffers()
        if cloud is None or len(cloud) == 0:
            return
        position_vbo, color_vbo = GL.glGenBuffers(2)
        GL.glBindVertexArray(self._cloud_vao)
        for location, vbo, data in ((0, position_vbo, cloud.positions), (1, color_vbo, cloud.colors)):
            GL.glBindBuffer(GL.GL_ARRAY_BUFFER, vbo)
            GL.glBufferData(GL.GL_ARRAY_BUFFER, data.nbytes, data, GL.GL_STATIC_DRAW)
            GL.glEnableVertexAttribArray(location)
            GL.glVertexAttribPointer(location, 3, GL.GL_FLOAT, GL.GL_FALSE, 0, ctypes.c_void_p(0))
        self._cloud_vbos = (int(position_vbo), int(color_vbo))
        self._cloud_count = len(cloud)
        self._uploaded_cloud = cloud

    def _free_buffers(self) -> None:
        if self._cloud_vbos:
            GL.glDeleteBuffers(len(self._cloud_vbos), self._cloud_vbos)
        self._cloud_vbos = ()
        self._cloud_count = 0
        self._uploaded_cloud = None

    def _on_cloud_released(self, cloud: PointCloud) -> None:
        # May run on any thread; GL calls wait for the render loop.
        self._released.append(cloud)

    def _delete_released(self) -> None:
        while self._released:
            cloud = self._released.popleft()
            if cloud is self._uploaded_cloud:
                self._free_buffers()

    def _draw_cloud(self, rotation: float) -> None:
        r, g, b = self._config.background
        GL.glClearColor(r, g, b, 1.0)
        GL.glClear(GL.GL_COLOR_BUFFER_BIT | GL.GL_DEPTH_BUFFER_BIT)
        cloud = self._uploaded_cloud
        if cloud is None:
            return
        material = cloud.material
        eye = orbit_eye(self._config.camera_position, self._zoom)
        view = look_at(eye, (0.0, 0.0, 0.0))
        projection = perspective(
            self._config.camera_fov, self._config.aspect, self._config.camera_near, self._config.camera_far
        )
        program = self._point_program
        GL.glUseProgram(program)
        GL.glUniformMatrix4fv(GL.glGetUniformLocation(program, "uModel"), 1, GL.GL_TRUE, rotation_y(rotation))
        GL.glUniformMatrix4fv(GL.glGetUniformLocation(program, "uView"), 1, GL.GL_TRUE, view)
        GL.glUniformMatrix4fv(GL.glGetUniformLocation(program, "uProjection"), 1, GL.GL_TRUE, projection)
        GL.glUniform1f(GL.glGetUniformLocation(program, "uPointSize"), material.point_size)
        # Matches a perspective camera's size attenuation: half the drawable height.
        pixel_scale = self._config.window_height * self._pixel_ratio / 2.0
        GL.glUniform1f(GL.glGetUniformLocation(program, "uPixelScale"), pixel_scale)
        GL.glUniform1f(GL.glGetUniformLocation(program, "uOpacity"), material.opacity)
        if self._sprite_texture is not None:
            GL.glActiveTexture(GL.GL_TEXTURE1)
            GL.glBindTexture(GL.GL_TEXTURE_2D, self._sprite_texture)
        GL.glDepthMask(GL.GL_TRUE if material.depth_write else GL.GL_FALSE)
        GL.glEnable(GL.GL_BLEND)
        if material.additive_blending:
            GL.glBlendFunc(GL.GL_SRC_ALPHA, GL.GL_ONE)
        else:
            GL.glBlendFunc(GL.GL_SRC_ALPHA, GL.GL_ONE_MINUS_SRC_ALPHA)
        GL.glBindVertexArray(self._cloud_vao)
        GL.glDrawArrays(GL.GL_POINTS, 0, self._cloud_count)
        GL.glDisable(GL.GL_BLEND)
        GL.glDepthMask(GL.GL_TRUE)

    def _draw_hud(self, clock: FrameClock, now: float) -> None:
        if self._hud_dirty or now - self._hud_drawn_at >= self._hud_interval:
            image = self._hud.render(self._panel.lines(), clock.fps, self._cloud_count)
            self._upload_rgba(self._hud_texture, image)
            self._hud_dirty = False
            self._hud_drawn_at = now
        GL.glUseProgram(self._quad_program)
        GL.glActiveTexture(GL.GL_TEXTURE0)
        GL.glBindTexture(GL.GL_TEXTURE_2D, self._hud_texture)
        GL.glEnable(GL.GL_BLEND)
        GL.glBlendFunc(GL.GL_SRC_ALPHA, GL.GL_ONE_MINUS_SRC_ALPHA)
        GL.glBindVertexArray(self._quad_vao)
        GL.glDrawArrays(GL.GL_TRIANGLE_STRIP, 0, 4)
        GL.glDisable(GL.GL_BLEND)

    def _build_program(self, vertex_path: Path, fragment_path: Path) -> int:
        with vertex_path.open("r", encoding="utf-8") as vf:
            vert_src = vf.read()
        with fragment_path.open("r", encoding="utf-8") as ff:
            frag_src = ff.read()
        return self._build_program_from_source(vert_src, frag_src)

    def _build_program_from_source(self, vert_src: str, frag_src: str) -> int:
        vertex_shader = GL.glCreateShader(GL.GL_VERTEX_SHADER)
        GL.glShaderSource(vertex_shader, vert_src)
        GL.glCompileShader(vertex_shader)
        self._assert_shader(vertex_shader)
        fragment_shader = GL.glCreateShader(GL.GL_FRAGMENT_SHADER)
        GL.glShaderSource(fragment_shader, frag_src)
        GL.glCompileShader(fragment_shader)
        self._assert_shader(fragment_shader)
        program = GL.glCreateProgram()
        GL.glAttachShader(program, vertex_shader)
        GL.glAttachShader(program, fragment_shader)
        GL.glLinkProgram(program)
        self._assert_program(program)
        GL.glDeleteShader(vertex_shader)
        GL.glDeleteShader(fragment_shader)
        return program

    def _assert_shader(self, shader: int) -> None:
        status = GL.glGetShaderiv(shader, GL.GL_COMPILE_STATUS)
        if status != GL.GL_TRUE:
            log = GL.glGetShaderInfoLog(shader).decode()
            raise RuntimeError(f"Shader compilation failed: {log}")

    def _assert_program(self, program: int) -> None:
        status = GL.glGetProgramiv(program, GL.GL_LINK_STATUS)
        if status != GL.GL_TRUE:
            log = GL.glGetProgramInfoLog(program).decode()
            raise RuntimeError(f"Program link failed: {log}")

    def _on_key(self, window, key, scancode, action, mods) -> None:  # pragma: no cover - GLFW callback
        if action == glfw.PRESS and key == glfw.KEY_ESCAPE:
            self._stop_event.set()
            glfw.set_window_should_close(window, True)
            return
        coarse = bool(mods & glfw.MOD_SHIFT)
        if action in (glfw.PRESS, glfw.REPEAT):
            if key in (glfw.KEY_TAB, glfw.KEY_DOWN):
                if key == glfw.KEY_TAB and coarse:
                    self._panel.select_previous()
                else:
                    self._panel.select_next()
            elif key == glfw.KEY_UP:
                self._panel.select_previous()
            elif key == glfw.KEY_RIGHT:
                self._panel.nudge(1, coarse)
            elif key == glfw.KEY_LEFT:
                self._panel.nudge(-1, coarse)
            elif key == glfw.KEY_SPACE and action == glfw.PRESS:
                self._panel.toggle()
                self._panel.commit()
            elif key == glfw.KEY_R and action == glfw.PRESS:
                params = self._controller.parameters
                if params is not None:
                    self._controller.regenerate(params)
            elif key == glfw.KEY_H and action == glfw.PRESS:
                self._hud_visible = not self._hud_visible
            self._hud_dirty = True
        elif action == glfw.RELEASE and key in (glfw.KEY_LEFT, glfw.KEY_RIGHT):
            self._panel.commit()

    def _on_scroll(self, window, x_offset, y_offset) -> None:  # pragma: no cover - GLFW callback
        self._zoom *= self._config.zoom_step ** y_offset
        self._zoom = float(np.clip(self._zoom, 0.05, 20.0))


_QUAD_VERT = """
#version 330 core
layout(location = 0) in vec2 in_position;
layout(location = 1) in vec2 in_uv;
out vec2 v_uv;
void main() {
    v_uv = in_uv;
    gl_Position = vec4(in_position, 0.0, 1.0);
}
"""

_QUAD_FRAG = """
#version 330 core
in vec2 v_uv;
out vec4 fragColor;
uniform sampler2D uFrame;
void main() {
    fragColor = texture(uFrame, v_uv);
}
"""
