from rich.pretty import pprint

from argbinder import *


class Settings(Configuration):
    project = Option("project,p", type=str, required=True, descr="project to build")
    jobs = Option("jobs,j", type=int, default=1)
    verbose = Option("v,verbose", type=bool)
    tags = Option("tags,t", type=list)
    files = Parameters(descr="files to process")
    usage = Usage("h,help,?", "usage: main.py -project:NAME [-jobs N] [-v] [-tags a,b] FILES...")


if __name__ == '__main__':
    pprint(run(Settings))
