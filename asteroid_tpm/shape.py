"""Facet geometry of a triangulated shape model.

Loading mesh files and precomputing facet visibility are handled
outside this package; a ShapeModel is built from plain arrays.
"""
import numpy as np


class ShapeModel(object):
    """Triangulated surface of one body.

    Parameters
    ----------
    nodes : array_like, shape (Nv, 3)
        Vertex positions in the body-fixed frame [m]
    faces : array_like of int, shape (Ns, 3)
        Zero-based vertex indices of each triangle, counter-clockwise
        when seen from outside
    """

    def __init__(self, nodes, faces):
        self.nodes = np.array(nodes, dtype=float)
        self.faces = np.array(faces, dtype=np.int64)
        if self.nodes.ndim != 2 or self.nodes.shape[1] != 3:
            raise ValueError(f"nodes must have shape (Nv, 3), got {self.nodes.shape}")
        if self.faces.ndim != 2 or self.faces.shape[1] != 3:
            raise ValueError(f"faces must have shape (Ns, 3), got {self.faces.shape}")
        if self.faces.min() < 0 or self.faces.max() >= len(self.nodes):
            raise ValueError("faces refer to nodes that do not exist")

        self.vertices = self.nodes[self.faces]  # (Ns, 3, 3)
        A, B, C = self.vertices[:, 0], self.vertices[:, 1], self.vertices[:, 2]
        cross = np.cross(B - A, C - A)
        norm = np.linalg.norm(cross, axis=1)
        if np.any(norm == 0):
            raise ValueError("Shape model contains degenerate facets")

        self.centers = (A + B + C) / 3
        self.normals = cross / norm[:, np.newaxis]
        self.areas = 0.5 * norm

        for arr in (self.nodes, self.faces, self.vertices, self.centers,
                    self.normals, self.areas):
            arr.setflags(write=False)

    def __len__(self):
        return len(self.faces)

    @property
    def bounding_radius(self):
        """Radius of the origin-centred sphere enclosing every node [m]."""
        return float(np.max(np.linalg.norm(self.nodes, axis=1)))

    @property
    def surface_area(self):
        return float(np.sum(self.areas))

    def __repr__(self):
        return f"ShapeModel(nodes={len(self.nodes)}, faces={len(self.faces)})"
