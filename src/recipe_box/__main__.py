from recipe_box.cli import cli

cli()
