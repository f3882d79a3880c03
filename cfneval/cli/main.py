def main():
    from .cfneval import cfneval

    cfneval()


if __name__ == "__main__":
    main()
