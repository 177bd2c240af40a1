import time

import implview


def main() -> None:
    server = implview.run(open_browser=False)

    # Tables can arrive in any order relative to the page that renders them.
    server.submit(
        "core/fmt/trait.Binary",
        {
            "bitflags": [
                'impl <a class="trait" href="https://doc.rust-lang.org/nightly/core/fmt/trait.Binary.html">Binary</a> '
                'for <a class="struct" href="bitflags/example_generated/struct.Flags.html">Flags</a>'
            ],
            "gl": [],
        },
    )
    server.submit("rand/trait.Rng", {"rand": [], "arrayvec": []})

    for s in server.list_subjects():
        print(f"{s['name']}: {s['implementorCount']} implementor(s) in {s['namespaceCount']} crate(s)")

    print(f"Serving on {server.url}")
    while True:
        time.sleep(3600)


if __name__ == "__main__":
    main()
