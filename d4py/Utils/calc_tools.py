import numpy as np
from scipy.spatial import cKDTree

# Above this many atoms neighbour pairs are found with a KD-tree
NEIGHBOR_LIST_THRESHOLD = 200


def distance_vectors(positions):
    """Return rij[i, j] = R_i - R_j and the distance matrix"""
    positions = np.asarray(positions, dtype=np.float64)
    rij = positions[:, None, :] - positions[None, :, :]
    dist = np.sqrt(np.sum(rij ** 2, axis=-1))
    return rij, dist


def neighbor_pairs(positions, cutoff, threshold=NEIGHBOR_LIST_THRESHOLD):
    """
    Unordered atom pairs (i < j) within a distance cutoff.

    Parameters:
    -----------
    positions : np.ndarray, shape (n, 3)
    cutoff : float
        Pairs with r_ij <= cutoff are kept
    threshold : int
        Atom count above which a KD-tree replaces the dense distance matrix

    Returns:
    --------
    idx_i, idx_j : np.ndarray of int
        Pair indices in ascending (i, j) order
    vec : np.ndarray, shape (npair, 3)
        R_i - R_j
    dist : np.ndarray, shape (npair,)
    """
    positions = np.asarray(positions, dtype=np.float64)
    n = len(positions)
    if n < 2:
        empty = np.zeros(0, dtype=int)
        return empty, empty.copy(), np.zeros((0, 3)), np.zeros(0)

    if n > threshold:
        kdtree = cKDTree(positions)
        pairs = kdtree.query_pairs(cutoff, output_type="ndarray")
        if len(pairs) == 0:
            idx_i = np.zeros(0, dtype=int)
            idx_j = np.zeros(0, dtype=int)
        else:
            pairs = np.sort(pairs, axis=1)
            order = np.lexsort((pairs[:, 1], pairs[:, 0]))
            idx_i, idx_j = pairs[order, 0], pairs[order, 1]
    else:
        idx_i, idx_j = np.triu_indices(n, k=1)

    vec = positions[idx_i] - positions[idx_j]
    dist = np.sqrt(np.sum(vec ** 2, axis=-1))
    mask = dist <= cutoff
    return idx_i[mask], idx_j[mask], vec[mask], dist[mask]


def neighbor_triples(natoms, idx_i, idx_j):
    """
    Unordered triples (i < j < k) whose three pairs all appear in a pair list.

    Triples come out in ascending (i, j, k) order.
    """
    adjacency = np.zeros((natoms, natoms), dtype=bool)
    adjacency[idx_i, idx_j] = True
    adjacency[idx_j, idx_i] = True

    triples = []
    for i in range(natoms):
        neigh = np.flatnonzero(adjacency[i, i + 1:]) + i + 1
        if len(neigh) < 2:
            continue
        sub = np.triu(adjacency[np.ix_(neigh, neigh)], k=1)
        jj, kk = np.nonzero(sub)
        if len(jj) == 0:
            continue
        triples.append(np.column_stack([np.full(len(jj), i), neigh[jj], neigh[kk]]))

    if not triples:
        return np.zeros((0, 3), dtype=int)
    return np.concatenate(triples).astype(int)
