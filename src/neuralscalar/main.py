import click
import json
import logging
import torch
from neuralscalar import config
from neuralscalar.calc_graph.loader import build_graph
from neuralscalar.calc_graph.registry import registry_session


def evaluate_graph(description: dict) -> dict:
    with registry_session():
        scalars = build_graph(description)
        return {name: float(scalar) for name, scalar in scalars.items()}


@click.command()
@click.option('--seed', default=None, type=int, help='Seed for network initialization')
@click.option('--verbose/--no-verbose', default=False)
@click.argument('graph_path', type=click.Path(exists=True))
def run(seed, verbose, graph_path):
    """
    Build the neural scalar graph described in GRAPH_PATH (JSON),
    evaluate every scalar and print the values as JSON.
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format=config.LOG_FORMAT,
                        datefmt=config.LOG_DATEFMT)
    if seed is not None:
        torch.manual_seed(seed)

    with open(graph_path, 'r') as f:
        description = json.load(f)

    click.echo(json.dumps(evaluate_graph(description)))


if __name__ == '__main__':
    run()
