import subprocess
import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import camsight.media.decoders.registry as registry
from camsight.media.decoders.registry import (
    DenylistRegistry,
    GiRegistry,
    GstInspectRegistry,
    StaticRegistry,
    create_registry,
)


class GstInspectRegistryBehaviorTests(unittest.TestCase):
    def test_present_when_gst_inspect_exits_zero(self):
        """Validate scenario: exit code 0 from gst-inspect means the element exists."""
        reg = GstInspectRegistry()
        with patch("camsight.media.decoders.registry.shutil.which", return_value="/usr/bin/gst-inspect-1.0"), patch(
            "camsight.media.decoders.registry.subprocess.run", return_value=SimpleNamespace(returncode=0)
        ) as mrun:
            self.assertTrue(reg.has_element("jpegdec"))
        self.assertEqual(mrun.call_args.args[0], ["/usr/bin/gst-inspect-1.0", "jpegdec"])

    def test_missing_when_gst_inspect_fails(self):
        """Validate scenario: a non-zero exit code means the element is absent."""
        reg = GstInspectRegistry()
        with patch("camsight.media.decoders.registry.shutil.which", return_value="/usr/bin/gst-inspect-1.0"), patch(
            "camsight.media.decoders.registry.subprocess.run", return_value=SimpleNamespace(returncode=1)
        ):
            self.assertFalse(reg.has_element("nvjpegdec"))

    def test_timeout_and_os_errors_count_as_missing(self):
        """Validate scenario: timeouts and spawn errors never propagate."""
        reg = GstInspectRegistry(timeout_s=1.0)
        with patch("camsight.media.decoders.registry.shutil.which", return_value="/usr/bin/gst-inspect-1.0"):
            with patch(
                "camsight.media.decoders.registry.subprocess.run",
                side_effect=subprocess.TimeoutExpired(cmd="gst-inspect-1.0", timeout=1.0),
            ):
                self.assertFalse(reg.has_element("vah264dec"))
            with patch("camsight.media.decoders.registry.subprocess.run", side_effect=OSError("boom")):
                self.assertFalse(reg.has_element("vah264dec"))

    def test_missing_binary_skips_subprocess(self):
        """Validate scenario: without gst-inspect every element is reported missing."""
        reg = GstInspectRegistry()
        with patch("camsight.media.decoders.registry.shutil.which", return_value=None), patch(
            "camsight.media.decoders.registry.subprocess.run"
        ) as mrun:
            self.assertFalse(reg.has_element("jpegdec"))
            self.assertFalse(reg.has_element("avdec_mjpeg"))
        mrun.assert_not_called()

    def test_binary_resolved_once(self):
        """Validate scenario: PATH lookup happens once per registry."""
        reg = GstInspectRegistry()
        with patch(
            "camsight.media.decoders.registry.shutil.which", return_value="/usr/bin/gst-inspect-1.0"
        ) as mwhich, patch("camsight.media.decoders.registry.subprocess.run", return_value=SimpleNamespace(returncode=0)):
            reg.has_element("a")
            reg.has_element("b")
        self.assertEqual(mwhich.call_count, 1)

    def test_configured_binary_preferred(self):
        """Validate scenario: a configured binary path that exists wins over PATH."""
        reg = GstInspectRegistry(binary="/opt/gst/bin/gst-inspect-1.0")
        with patch("camsight.media.decoders.registry.os.path.isfile", return_value=True), patch(
            "camsight.media.decoders.registry.shutil.which"
        ) as mwhich:
            self.assertEqual(reg.binary(), "/opt/gst/bin/gst-inspect-1.0")
        mwhich.assert_not_called()

    def test_blank_name_is_missing(self):
        """Validate scenario: empty element names are never looked up."""
        reg = GstInspectRegistry()
        with patch("camsight.media.decoders.registry.subprocess.run") as mrun:
            self.assertFalse(reg.has_element(""))
            self.assertFalse(reg.has_element("   "))
        mrun.assert_not_called()


class RegistryWrappersBehaviorTests(unittest.TestCase):
    def test_static_registry(self):
        """Validate scenario: static registry answers from its fixed set."""
        reg = StaticRegistry([" jpegdec ", "", "avdec_h264"])
        self.assertTrue(reg.has_element("jpegdec"))
        self.assertTrue(reg.has_element("avdec_h264"))
        self.assertFalse(reg.has_element("nvh264dec"))

    def test_denylist_masks_elements(self):
        """Validate scenario: denied elements are missing, others defer to the wrapped registry."""
        inner = MagicMock()
        inner.has_element.return_value = True
        reg = DenylistRegistry(inner, ["vaapijpegdec"])
        self.assertFalse(reg.has_element("vaapijpegdec"))
        self.assertTrue(reg.has_element("jpegdec"))
        inner.has_element.assert_called_once_with("jpegdec")
        self.assertEqual(reg.denied, frozenset({"vaapijpegdec"}))

    def test_gi_registry_reports_missing_without_bindings(self):
        """Validate scenario: the PyGObject backend degrades to missing when Gst is unavailable."""
        with patch.object(registry, "Gst", None):
            reg = GiRegistry()
            self.assertFalse(GiRegistry.supported())
            self.assertFalse(reg.has_element("jpegdec"))

    def test_gi_registry_uses_element_factory(self):
        """Validate scenario: the PyGObject backend initializes Gst once and queries the factory."""
        fake_gst = MagicMock()
        fake_gst.ElementFactory.find.side_effect = lambda name: object() if name == "jpegdec" else None
        with patch.object(registry, "Gst", fake_gst):
            reg = GiRegistry()
            self.assertTrue(reg.has_element("jpegdec"))
            self.assertFalse(reg.has_element("nvjpegdec"))
        fake_gst.init.assert_called_once_with(None)


class CreateRegistryBehaviorTests(unittest.TestCase):
    def test_static_backend_from_config(self):
        """Validate scenario: the static backend is built from configured element names."""
        with patch.object(registry.config, "STATIC_ELEMENTS", ["jpegdec"]), patch.object(
            registry.config, "DECODER_DENYLIST", []
        ):
            reg = create_registry("static")
        self.assertIsInstance(reg, StaticRegistry)
        self.assertTrue(reg.has_element("jpegdec"))

    def test_inspect_backend_and_denylist(self):
        """Validate scenario: the denylist wraps whichever backend is selected."""
        with patch.object(registry.config, "DECODER_DENYLIST", ["nvh264dec"]), patch.object(
            registry.config, "GST_INSPECT_BIN", ""
        ):
            reg = create_registry("inspect")
        self.assertIsInstance(reg, DenylistRegistry)
        self.assertFalse(reg.has_element("nvh264dec"))
        self.assertEqual(reg.name, "inspect")

    def test_gi_request_falls_back_to_inspect(self):
        """Validate scenario: asking for gi without bindings yields the gst-inspect backend."""
        with patch.object(registry, "Gst", None), patch.object(registry.config, "DECODER_DENYLIST", []):
            reg = create_registry("gi")
            auto = create_registry("auto")
        self.assertIsInstance(reg, GstInspectRegistry)
        self.assertIsInstance(auto, GstInspectRegistry)


if __name__ == "__main__":
    unittest.main()
