from rich.pretty import pprint

from pennant import Program

__styles__ = {
    "program-name": "bold #FFD600",
}

program = (
    Program("deploy", "Deploy the built application to a git branch", colorful=True)
    .version("1.0.0")
    .option("-d, --dir <dir>", "base directory for all source files", "dist")
    .option("-r, --repo <repo>", "repository url to publish to")
    .option("-m, --message <message>", "commit message", "Auto-generated commit")
    .option("-b, --branch <branch>", "git branch to push pages", "gh-pages")
    .option("-n, --name <name>", "commit author name")
    .option("-e, --email <email>", "commit author email")
    .option("-S, --no-silent", "log credentials in the console")
    .option("-T, --no-dotfiles", "include dotfiles")
    .option("--no-notfound", "do not create a 404.html file")
    .option("--no-nojekyll", "do not add a .nojekyll file")
    .option("-c, --cname <domain>", "custom domain to write into a CNAME file")
    .option("-a, --add", "only add, never remove existing files")
    .option("--dry-run", "run through without making any changes")
    .option("-v, --verbose", "increase verbosity", lambda _, total: total + 1, 0)
)


if __name__ == '__main__':
    program.parse()
    pprint(program.values())
    pprint(program.positionals)
