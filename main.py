from rich.pretty import pprint

from rollcall import *

app = App(colorful=True)


@app.command("hello <name:string>")
def hello(name):
    print(f"hello {name}")


@app.command("goodbye <name:string=person>")
def goodbye(name):
    print(f"goodbye {name}")


@app.command("ping")
def ping():
    print("pong")


@app.command("count <from:int> <to:int> <double:bool=false>")
def count(start, stop, double):
    for number in range(start, stop + 1):
        print(number * (2 if double else 1))


@app.command("describe <name>")
def describe(name):
    pprint([command for command in app.commands if command.name == name])


if __name__ == '__main__':
    app.run()
