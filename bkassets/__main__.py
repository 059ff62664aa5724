from .cli.cmdline.bkassets import main


if __name__ == "__main__":
    main()
