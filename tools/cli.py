import click

import config
from scenarios import SCENARIO_PRESETS
from experiments_runner import run_multiple_trials
from main import run_batch, run_single_nonvisual, run_single_visual, setup_logging  # reuse existing functions


@click.group()
@click.option("-v", "--verbose", is_flag=True)
def cli(verbose):
    setup_logging(verbose)


@cli.command()
def list_scenarios():
    for k in sorted(SCENARIO_PRESETS.keys()):
        click.echo(k)


@cli.command()
@click.argument("scenario")
@click.option("--particles", type=int)
def visual(scenario, particles):
    run_single_visual(scenario, particles=particles)


@cli.command()
@click.argument("scenario")
@click.option("--particles", type=int)
@click.option("--ticks", type=int)
@click.option("--seed", type=int)
@click.option("--out-dir", type=click.Path(), default=config.OUTPUT_DIR)
def run(scenario, particles, ticks, seed, out_dir):
    sim = run_single_nonvisual(scenario, particles=particles, ticks=ticks, seed=seed, out_dir=out_dir)
    click.echo(sim.get_metrics_summary())


@cli.command()
@click.argument("scenario")
@click.option("--trials", default=5, type=int)
@click.option("--workers", default=2, type=int)
@click.option("--particles", type=int)
@click.option("--ticks", type=int)
def batch(scenario, trials, workers, particles, ticks):
    run_batch(scenario, trials=trials, workers=workers, particles=particles, ticks=ticks)


@cli.command()
@click.argument("scenario")
@click.option("--trials", default=5, type=int)
@click.option("--base-seed", default=0, type=int)
@click.option("--out-dir", type=click.Path(), default="experiments/output")
def trials(scenario, trials, base_seed, out_dir):
    run_multiple_trials(scenario, trials=trials, base_seed=base_seed, out_dir=out_dir)


if __name__ == "__main__":
    cli()
