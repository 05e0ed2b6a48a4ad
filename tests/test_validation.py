"""Tests for tool argument validation."""

from __future__ import annotations

import pytest

from figma_mcp.core.errors import ValidationFailure
from figma_mcp.schemas.figma import DownloadImagesRequest, GetFigmaDataRequest, normalize_node_id
from figma_mcp.services.validation import validate_arguments


def _data_args(**overrides):
    args = {"fileKey": "AbC123", "figmaOAuthToken": "token"}
    args.update(overrides)
    return args


def _image_args(nodes, **overrides):
    args = {"fileKey": "AbC123", "figmaOAuthToken": "token", "nodes": nodes}
    args.update(overrides)
    return args


# =====================================================================
# get_figma_data arguments
# =====================================================================


class TestGetFigmaDataRequest:
    def test_minimal_arguments(self):
        validated = validate_arguments(GetFigmaDataRequest, _data_args())

        assert validated.ok
        request = validated.unwrap()
        assert request.file_key == "AbC123"
        assert request.node_id is None
        assert request.depth is None

    @pytest.mark.parametrize("file_key", ["abc/def", "abc-def", "", "abc def"])
    def test_rejects_non_alphanumeric_file_key(self, file_key):
        validated = validate_arguments(GetFigmaDataRequest, _data_args(fileKey=file_key))

        assert not validated.ok
        assert "fileKey" in validated.error

    @pytest.mark.parametrize("node_id", ["1234:5678", "1234-5678", "I5666:180910;1:10515;1:10336"])
    def test_accepts_node_id_forms(self, node_id):
        assert validate_arguments(GetFigmaDataRequest, _data_args(nodeId=node_id)).ok

    @pytest.mark.parametrize("node_id", ["abc", "12:", "1:2;"])
    def test_rejects_malformed_node_id(self, node_id):
        validated = validate_arguments(GetFigmaDataRequest, _data_args(nodeId=node_id))

        assert not validated.ok
        assert "Node ID must be like" in validated.error

    def test_rejects_zero_depth(self):
        assert not validate_arguments(GetFigmaDataRequest, _data_args(depth=0)).ok

    def test_token_required(self):
        validated = validate_arguments(GetFigmaDataRequest, {"fileKey": "abc"})

        assert not validated.ok
        assert "figmaOAuthToken" in validated.error

    def test_non_object_arguments(self):
        validated = validate_arguments(GetFigmaDataRequest, ["abc"])

        assert validated.error == "Tool arguments must be an object"
        with pytest.raises(ValidationFailure):
            validated.unwrap()


def test_normalize_node_id():
    assert normalize_node_id("1-2") == "1:2"
    assert normalize_node_id("I1-2;3-4") == "I1:2;3:4"
    assert normalize_node_id(None) is None


# =====================================================================
# download_figma_images arguments
# =====================================================================


class TestDownloadImagesRequest:
    def test_defaults(self):
        request = validate_arguments(
            DownloadImagesRequest, _image_args([{"imageRef": "ref", "fileName": "a.png"}])
        ).unwrap()

        assert request.png_scale == 2
        node = request.nodes[0]
        assert node.needs_cropping is False
        assert node.requires_image_dimensions is False
        assert node.filename_suffix is None

    @pytest.mark.parametrize("file_name", ["a.jpg", "../a.png", "a b.png", "a.png/", "png"])
    def test_rejects_bad_file_names(self, file_name):
        validated = validate_arguments(
            DownloadImagesRequest, _image_args([{"imageRef": "ref", "fileName": file_name}])
        )

        assert not validated.ok
        assert "nodes[0].fileName" in validated.error

    def test_requires_node_id_or_image_ref(self):
        validated = validate_arguments(DownloadImagesRequest, _image_args([{"fileName": "a.png"}]))

        assert not validated.ok
        assert "nodeId or an imageRef" in validated.error

    def test_rejects_empty_node_list(self):
        assert not validate_arguments(DownloadImagesRequest, _image_args([])).ok

    @pytest.mark.parametrize("scale", [0, -1, 4.5])
    def test_png_scale_bounds(self, scale):
        validated = validate_arguments(
            DownloadImagesRequest,
            _image_args([{"nodeId": "1:2", "fileName": "a.png"}], pngScale=scale),
        )
        assert not validated.ok

    def test_crop_transform_must_be_2x3(self):
        validated = validate_arguments(
            DownloadImagesRequest,
            _image_args([
                {"imageRef": "ref", "fileName": "a.png", "needsCropping": True, "cropTransform": [[1, 0], [0, 1]]}
            ]),
        )

        assert not validated.ok
        assert "2x3" in validated.error
