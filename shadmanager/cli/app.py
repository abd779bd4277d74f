import questionary
from rich.console import Console

from shadmanager.cli.pix_menu import generate_pix_menu, inspect_pix_menu

console = Console()


def main_menu() -> None:
    console.print()
    console.print("[bold]Shad Manager - PIX[/bold]", style="cyan")
    console.print()

    while True:
        choice = questionary.select(
            "Menu Principal",
            choices=[
                "Gerar Código PIX",
                "Validar Código PIX",
                "Sair",
            ],
        ).ask()

        if choice is None or choice == "Sair":
            console.print("[bold]Até logo![/bold]")
            break
        elif choice == "Gerar Código PIX":
            generate_pix_menu()
        elif choice == "Validar Código PIX":
            inspect_pix_menu()
