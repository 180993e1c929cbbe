"""Unit tests for the ready-made scenes."""

import pytest


class TestSingleSphereScene:
    def test_one_sphere(self):
        """Test the single sphere scene holds one grey sphere."""
        from spheretrace.scene.presets import SPHERE_CENTER, SPHERE_RADIUS, create_single_sphere_scene

        scene, camera = create_single_sphere_scene()
        assert scene.get_sphere_count() == 1
        sphere = scene.spheres[0]
        assert sphere.center == SPHERE_CENTER
        assert sphere.radius == SPHERE_RADIUS
        assert scene.get_material(sphere.material_id).albedo == (0.5, 0.5, 0.5)
        assert camera.lookfrom == (0.0, 0.0, 0.0)
        assert camera.vfov == 90.0

    def test_with_ground(self):
        """Test the optional ground adds a large second sphere."""
        from spheretrace.scene.presets import GROUND_RADIUS, create_single_sphere_scene

        scene, _ = create_single_sphere_scene(with_ground=True)
        assert scene.get_sphere_count() == 2
        assert scene.spheres[1].radius == GROUND_RADIUS

    def test_aspect_ratio(self):
        """Test the aspect ratio reaches the camera."""
        from spheretrace.scene.presets import create_single_sphere_scene

        _, camera = create_single_sphere_scene(aspect_ratio=2.0)
        assert camera.aspect_ratio == 2.0

    def test_center_ray_hits_sphere(self):
        """Test the camera's center ray hits the sphere's front."""
        from spheretrace.scene.presets import create_single_sphere_scene

        scene, camera = create_single_sphere_scene()
        origin, direction = camera.get_ray(0.5, 0.5)
        hit = scene.hit(tuple(origin), tuple(direction))
        assert hit is not None
        assert hit.t == pytest.approx(0.5, abs=1e-5)


class TestMaterialShowcaseScene:
    def test_layout(self):
        """Test the showcase places ground, diffuse, glass and metal spheres."""
        from spheretrace.materials.dielectric import Dielectric
        from spheretrace.materials.lambertian import Lambertian
        from spheretrace.materials.metal import Metal
        from spheretrace.scene.presets import create_material_showcase_scene

        scene, _ = create_material_showcase_scene()
        assert scene.get_sphere_count() == 5
        assert scene.get_material_count() == 5

        ground, center, glass_outer, glass_inner, metal = scene.spheres
        assert ground.radius == 100.0
        assert isinstance(scene.get_material(center.material_id), Lambertian)
        assert isinstance(scene.get_material(glass_outer.material_id), Dielectric)
        assert glass_inner.material_id == glass_outer.material_id
        assert glass_inner.radius == pytest.approx(-0.4)
        assert glass_inner.center == glass_outer.center == (-1.0, 0.0, -1.0)
        assert isinstance(scene.get_material(metal.material_id), Metal)
        assert metal.center == (1.0, 0.0, -1.0)

    def test_solid_glass(self):
        """Test zero glass thickness drops the inner bubble."""
        from spheretrace.scene.presets import ShowcaseParams, create_material_showcase_scene

        scene, _ = create_material_showcase_scene(ShowcaseParams(glass_thickness=0.0))
        assert scene.get_sphere_count() == 4
        assert all(s.radius > 0 for s in scene.spheres)

    @pytest.mark.parametrize("thickness", [-0.1, 0.5, 1.0])
    def test_rejects_bad_thickness(self, thickness):
        """Test glass thickness outside [0, 0.5) raises ValueError."""
        from spheretrace.scene.presets import ShowcaseParams, create_material_showcase_scene

        with pytest.raises(ValueError):
            create_material_showcase_scene(ShowcaseParams(glass_thickness=thickness))

    def test_params_flow_through(self):
        """Test showcase parameters reach the camera and materials."""
        from spheretrace.scene.presets import ShowcaseParams, create_material_showcase_scene

        params = ShowcaseParams(vfov=40.0, aspect_ratio=1.0, glass_ior=1.33, metal_fuzz=0.3)
        scene, camera = create_material_showcase_scene(params)
        assert camera.vfov == 40.0
        assert camera.aspect_ratio == 1.0
        assert scene.get_material(scene.spheres[2].material_id).ior == 1.33
        assert scene.get_material(scene.spheres[4].material_id).fuzz == 0.3

    def test_ray_leaves_center_sphere_upward(self):
        """Test a ray from the center sphere's middle exits through its back face."""
        from spheretrace.scene.presets import create_material_showcase_scene

        scene, _ = create_material_showcase_scene()
        hit = scene.hit((0.0, 0.0, -1.0), (0.0, 1.0, 0.0))
        assert hit is not None
        assert hit.t == pytest.approx(0.5, abs=1e-5)
        assert hit.front_face is False
        assert hit.material_id == scene.spheres[1].material_id

    def test_ground_touching_center_resolves_to_ground(self):
        """Test the shared contact point goes to the ground, which was added first."""
        from spheretrace.scene.presets import create_material_showcase_scene

        scene, _ = create_material_showcase_scene()
        # The center sphere's bottom and the ground's top meet at (0, -0.5, -1)
        hit = scene.hit((0.0, 0.0, -1.0), (0.0, -1.0, 0.0))
        assert hit is not None
        assert hit.t == pytest.approx(0.5, abs=1e-5)
        assert hit.material_id == scene.spheres[0].material_id
        assert hit.front_face is True
