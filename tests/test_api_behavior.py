import unittest

from fastapi import FastAPI
from fastapi.testclient import TestClient

from camsight.api import decoders_router, insights_router
from camsight.context import AppContext, get_context
from camsight.media.decoders.availability import AvailabilityCache
from camsight.media.decoders.definitions import MJPEG_DECODERS, Codec
from camsight.media.decoders.registry import StaticRegistry


class ApiBehaviorTests(unittest.TestCase):
    def setUp(self):
        """Prepare an app wired to a static element registry."""
        self.ctx = AppContext(registry=StaticRegistry({"jpegdec", "avdec_mjpeg", "nvh264dec", "avdec_h264"}))
        app = FastAPI()
        app.include_router(decoders_router)
        app.include_router(insights_router)
        app.dependency_overrides[get_context] = lambda: self.ctx
        self.client = TestClient(app)

    def test_list_decoders(self):
        """Validate scenario: the catalog listing reports availability and the resolved element."""
        r = self.client.get("/api/decoders")
        self.assertEqual(r.status_code, 200, r.text)
        body = r.json()
        self.assertEqual(body["fallback"], "decodebin")
        self.assertEqual(body["registry"], "static")
        self.assertEqual(set(body["codecs"]), {"mjpeg", "h264", "h265"})
        self.assertEqual(body["codecs"]["mjpeg"]["element"], "jpegdec max-errors=-1")
        self.assertEqual(body["codecs"]["h264"]["element"], "nvh264dec")
        self.assertEqual(body["codecs"]["h265"]["element"], "decodebin")
        first = body["codecs"]["mjpeg"]["decoders"][0]
        self.assertEqual(first["descriptor"], "jpegdec max-errors=-1")
        self.assertTrue(first["available"])
        self.assertEqual(first["kind"], "software")

    def test_codec_decoders_accepts_aliases(self):
        """Validate scenario: codec path segments accept codec ids and pixel format aliases."""
        for codec in ("h264", "H264"):
            r = self.client.get(f"/api/decoders/{codec}")
            self.assertEqual(r.status_code, 200, r.text)
            self.assertEqual(r.json()["codec"], "h264")
        r = self.client.get("/api/decoders/hevc")
        self.assertEqual(r.json()["codec"], "h265")
        r = self.client.get("/api/decoders/MJPG")
        self.assertEqual(r.json()["codec"], "mjpeg")

    def test_codec_decoders_rejects_unknown(self):
        """Validate scenario: unknown codecs return 400."""
        r = self.client.get("/api/decoders/yuyv")
        self.assertEqual(r.status_code, 400)
        self.assertIn("unsupported_codec", r.json()["detail"])

    def test_hardware_decoders(self):
        """Validate scenario: the hardware summary lists installed hardware decoders."""
        r = self.client.get("/api/decoders/hardware")
        self.assertEqual(r.status_code, 200, r.text)
        self.assertEqual(r.json(), {"count": 1, "decoders": [{"name": "nvh264dec", "description": "NVIDIA H.264 (NVDEC)"}]})

    def test_chain_endpoint(self):
        """Validate scenario: ad-hoc chain queries mark the active decoder."""
        r = self.client.get(
            "/api/insights/chain",
            params={"pixel_format": "H264", "pipeline": "src ! h264parse ! avdec_h264 max-threads=0 ! sink"},
        )
        self.assertEqual(r.status_code, 200, r.text)
        states = {d["name"]: d["state"] for d in r.json()["decoder_chain"]}
        self.assertEqual(states["avdec_h264"], "selected")
        self.assertEqual(states["nvh264dec"], "available")
        self.assertEqual(states["openh264dec"], "unavailable")

    def test_chain_endpoint_without_format(self):
        """Validate scenario: no pixel format means an empty chain."""
        r = self.client.get("/api/insights/chain", params={"pipeline": "jpegdec ! sink"})
        self.assertEqual(r.status_code, 200, r.text)
        self.assertEqual(r.json()["decoder_chain"], [])

    def test_report_pipeline_and_metrics(self):
        """Validate scenario: reported pipelines and metrics show up in the insights state."""
        r = self.client.post(
            "/api/insights/pipeline",
            json={
                "pixel_format": "MJPG",
                "pipeline": "pipewiresrc ! image/jpeg ! jpegdec max-errors=-1 ! videoconvert ! appsink",
                "source": "V4L2 via PipeWire",
                "resolution": "1280x720",
            },
        )
        self.assertEqual(r.status_code, 200, r.text)
        self.assertEqual(r.json()["decoder_chain"][0]["state"], "selected")

        r = self.client.post("/api/insights/metrics", json={"metrics": {"dropped_frames": 3, "frame_latency_us": 8000}})
        self.assertEqual(r.status_code, 200, r.text)

        r = self.client.get("/api/insights")
        body = r.json()
        self.assertEqual(body["dropped_frames"], 3)
        self.assertEqual(body["frame_latency_us"], 8000)
        self.assertEqual(body["format_chain"]["resolution"], "1280x720")
        self.assertIn("jpegdec", body["full_pipeline_string"])

    def test_report_metrics_rejects_unknown(self):
        """Validate scenario: unknown metric names return 400."""
        r = self.client.post("/api/insights/metrics", json={"metrics": {"fps_magic": 1}})
        self.assertEqual(r.status_code, 400)
        self.assertIn("unknown_metrics", r.json()["detail"])

    def test_report_metrics_rejects_non_finite_values(self):
        """Validate scenario: NaN and Infinity return 400 and leave earlier metrics unchanged."""
        r = self.client.post("/api/insights/metrics", json={"metrics": {"frame_latency_us": 7}})
        self.assertEqual(r.status_code, 200, r.text)
        headers = {"content-type": "application/json"}
        for raw in ('{"metrics": {"frame_latency_us": 9, "dropped_frames": NaN}}', '{"metrics": {"dropped_frames": Infinity}}'):
            r = self.client.post("/api/insights/metrics", content=raw, headers=headers)
            self.assertEqual(r.status_code, 400, r.text)
            self.assertEqual(r.json()["detail"], "invalid_metric:dropped_frames")
        body = self.client.get("/api/insights").json()
        self.assertEqual(body["frame_latency_us"], 7)
        self.assertEqual(body["dropped_frames"], 0)

    def test_codec_decoders_for_unconfigured_codec(self):
        """Validate scenario: a codec without a configured catalog returns 404."""
        self.ctx.availability = AvailabilityCache(
            StaticRegistry({"jpegdec"}), catalogs={Codec.MJPEG: MJPEG_DECODERS}
        )
        r = self.client.get("/api/decoders/h264")
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json()["detail"], "codec_not_configured:h264")
        r = self.client.get("/api/insights/chain", params={"pixel_format": "H264"})
        self.assertEqual(r.status_code, 200, r.text)
        self.assertEqual(r.json()["decoder_chain"], [])

    def test_reset_insights(self):
        """Validate scenario: DELETE clears the recorded state."""
        self.client.post("/api/insights/pipeline", json={"pixel_format": "MJPG", "pipeline": "jpegdec ! sink"})
        r = self.client.delete("/api/insights")
        self.assertEqual(r.status_code, 200)
        self.assertIsNone(self.client.get("/api/insights").json()["full_pipeline_string"])

    def test_build_pipeline(self):
        """Validate scenario: the pipeline endpoint builds a descriptor and its chain."""
        r = self.client.post("/api/pipeline", json={"pixel_format": "H264", "width": 1920, "height": 1080, "framerate": "30"})
        self.assertEqual(r.status_code, 200, r.text)
        body = r.json()
        self.assertIn("video/x-h264,width=1920,height=1080,framerate=30/1 ! h264parse ! nvh264dec", body["pipeline"])
        selected = [d["name"] for d in body["decoder_chain"] if d["state"] == "selected"]
        self.assertEqual(selected, ["nvh264dec"])

    def test_build_pipeline_requires_format(self):
        """Validate scenario: blank pixel formats are rejected."""
        r = self.client.post("/api/pipeline", json={"pixel_format": "  "})
        self.assertEqual(r.status_code, 400)


if __name__ == "__main__":
    unittest.main()
