"""Step and sidecar image materials."""

from __future__ import annotations

from typing import Iterable

from build_provenance.objects import SidecarState, StepState

from .contracts import OCI_SCHEME, MaterialExtractionError, ProvenanceMaterial


_SCHEME_SEPARATOR = "//"
_URI_SEPARATOR = "@"
_DIGEST_SEPARATOR = ":"


def from_step_images(steps: Iterable[StepState]) -> list[ProvenanceMaterial]:
    return [from_image_id(step.image_id) for step in steps]


def from_sidecar_images(sidecars: Iterable[SidecarState]) -> list[ProvenanceMaterial]:
    return [from_image_id(sidecar.image_id) for sidecar in sidecars]


def from_image_id(image_id: str) -> ProvenanceMaterial:
    """Parse ``name@alg:hex`` or ``scheme://name@alg:hex`` into an OCI material."""
    text = str(image_id or "")
    scheme_parts = text.split(_SCHEME_SEPARATOR)
    if len(scheme_parts) == 2:
        text = scheme_parts[1]

    uri_parts = text.split(_URI_SEPARATOR)
    if len(uri_parts) != 2:
        raise MaterialExtractionError(f"expected imageID {image_id} to be separable by @")
    digest_parts = uri_parts[1].split(_DIGEST_SEPARATOR)
    if len(digest_parts) != 2:
        raise MaterialExtractionError(f"expected imageID {image_id} to be separable by @ and :")
    return ProvenanceMaterial(
        uri=OCI_SCHEME + uri_parts[0],
        digest={digest_parts[0]: digest_parts[1]},
    )
