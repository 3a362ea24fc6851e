"""Click CLI for simdiv — similarity-sensitive metacommunity diversity."""

from __future__ import annotations

import logging

import click

from . import __version__
from .diversity import DiversityResult
from .errors import SimdivError
from .io import (
    load_abundance_table,
    load_distance_matrix,
    load_feature_table,
    load_similarity_matrix,
)
from .measures import measure_names

logger = logging.getLogger("simdiv")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _echo_result(result: DiversityResult) -> None:
    click.echo("\t".join(["id", *result.q_labels]))
    for row_id, row in zip(result.row_ids, result.values):
        click.echo("\t".join([row_id, *(f"{v:.10g}" for v in row)]))


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """simdiv — Similarity-Sensitive Metacommunity Diversity."""
    _setup_logging(verbose)


@main.command()
@click.option("--abundance", "-a", required=True, type=click.Path(exists=True), help="Abundance table TSV (types x subcommunities)")
@click.option("--similarity", "-s", default=None, type=click.Path(exists=True), help="Similarity matrix TSV (default: naive)")
@click.option("--distances", "-d", default=None, type=click.Path(exists=True), help="Distance matrix TSV; similarity is exp(-k * d)")
@click.option("--features", "-f", default=None, type=click.Path(exists=True), help="Feature table TSV (types x features); similarity is exp(-k * d)")
@click.option("--metric", default="euclidean", show_default=True, help="scipy pdist metric for --features")
@click.option("-k", "k", type=float, default=1.0, show_default=True, help="Decay rate for distance-based similarity")
@click.option("--measure", "-m", "measure_name", type=click.Choice(measure_names()), default="subcommunity.alpha", show_default=True, help="Diversity measure")
@click.option("-q", "qs", multiple=True, type=float, default=(0.0, 1.0, 2.0), show_default=True, help="Order of diversity; repeat for several")
@click.option("--additive", is_flag=True, help="Report additive diversities")
def measure(
    abundance: str,
    similarity: str | None,
    distances: str | None,
    features: str | None,
    metric: str,
    k: float,
    measure_name: str,
    qs: tuple[float, ...],
    additive: bool,
) -> None:
    """Compute a diversity measure and print it as TSV."""
    from .additive import diversity_to_additive
    from .measures import compute_measure
    from .similarity import similarity_from_distances, similarity_from_features

    if sum(x is not None for x in (similarity, distances, features)) > 1:
        raise click.UsageError("Give at most one of --similarity, --distances and --features")

    try:
        table = load_abundance_table(abundance)
        Z = None
        if similarity:
            Z = load_similarity_matrix(similarity, table.type_ids)
        elif distances:
            Z = similarity_from_distances(load_distance_matrix(distances, table.type_ids), k=k)
        elif features:
            Z = similarity_from_features(
                load_feature_table(features, table.type_ids), metric=metric, k=k
            )
        logger.info(
            "Computing %s for %d types x %d subcommunities",
            measure_name, table.n_types, table.n_subcommunities,
        )
        result = compute_measure(measure_name, table, qs, Z)
        if additive:
            result = diversity_to_additive(result)
    except SimdivError as e:
        raise click.ClickException(str(e)) from e
    _echo_result(result)


@main.command()
@click.option("--abundance", "-a", required=True, type=click.Path(exists=True), help="Abundance table TSV (types x subcommunities)")
@click.option("-q", "qs", multiple=True, type=float, default=(0.0, 1.0, 2.0), show_default=True, help="Order of diversity; repeat for several")
def hill(abundance: str, qs: tuple[float, ...]) -> None:
    """Naive Hill numbers of each subcommunity."""
    from .diversity import hill_numbers

    try:
        result = hill_numbers(load_abundance_table(abundance), qs)
    except SimdivError as e:
        raise click.ClickException(str(e)) from e
    _echo_result(result)


@main.command("list-measures")
def list_measures() -> None:
    """List the available diversity measures."""
    for name in measure_names():
        click.echo(name)
