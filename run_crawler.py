from webcrawl.crawler import Crawler

# crawl a single site from the command line: python run_crawler.py
if __name__ == "__main__":
    crawler = Crawler(max_parallelism=10)

    print("Starting crawler...")
    stats = crawler.crawl("https://www.rust-lang.org")
    print(stats)
